"""Tests for paginated video listing."""

from datetime import datetime

from bjjlib.models import Tag
from bjjlib.services.video_query_service import VideoQueryService


class TestListVideos:
    def test_empty_library(self, db) -> None:
        videos, total = VideoQueryService.list_videos(db)
        assert videos == []
        assert total == 0

    def test_pagination_over_45_videos(self, db, add_video) -> None:
        for n in range(45):
            add_video(f"Video {n}")

        first, total = VideoQueryService.list_videos(db, page=1, limit=20)
        last, _ = VideoQueryService.list_videos(db, page=3, limit=20)
        beyond, beyond_total = VideoQueryService.list_videos(db, page=4, limit=20)

        assert total == 45
        assert len(first) == 20
        assert first[0].title == "Video 44"
        assert [v.title for v in last] == [f"Video {n}" for n in range(4, -1, -1)]
        assert beyond == []
        assert beyond_total == 45

    def test_newest_first_ties_broken_by_id(self, db, add_video) -> None:
        same_time = datetime(2024, 5, 1)
        older = add_video("Older", created_at=datetime(2024, 4, 1))
        first = add_video("First", created_at=same_time)
        second = add_video("Second", created_at=same_time)

        videos, _ = VideoQueryService.list_videos(db)
        assert [v.id for v in videos] == [second.id, first.id, older.id]

    def test_search_is_case_insensitive_substring(self, db, add_video) -> None:
        add_video("Kimura from CLOSED guard")
        add_video("Closed Guard Basics")
        add_video("Mount escapes")

        videos, total = VideoQueryService.list_videos(db, search="closed GUARD")
        assert total == 2
        assert {v.title for v in videos} == {"Kimura from CLOSED guard", "Closed Guard Basics"}

    def test_search_folds_non_ascii_case(self, db, add_video) -> None:
        add_video("Über Guard sweep")
        add_video("Overhook guard")

        videos, total = VideoQueryService.list_videos(db, search="über")
        assert total == 1
        assert videos[0].title == "Über Guard sweep"

    def test_search_matches_text_as_typed(self, db, add_video) -> None:
        add_video("Kimura trap")
        add_video("kimura-trap entries")

        videos, total = VideoQueryService.list_videos(db, search="kimura ")
        assert total == 1
        assert videos[0].title == "Kimura trap"

    def test_search_treats_wildcards_literally(self, db, add_video) -> None:
        add_video("100% pressure passing")
        add_video("1000 reps")

        videos, total = VideoQueryService.list_videos(db, search="0%")
        assert total == 1
        assert videos[0].title == "100% pressure passing"

    def test_blank_search_disables_filter(self, db, add_video) -> None:
        add_video("One")
        add_video("Two")
        _, total = VideoQueryService.list_videos(db, search="   ")
        assert total == 2

    def test_tag_filter_requires_every_tag(self, db, add_video) -> None:
        add_video("Guard kimura", ["guard", "kimura"])
        add_video("Guard only", ["guard"])
        add_video("Kimura only", ["kimura"])
        ids = dict(db.query(Tag.name, Tag.id).all())

        videos, total = VideoQueryService.list_videos(
            db, tag_ids=[ids["guard"], ids["kimura"]]
        )
        assert total == 1
        assert videos[0].title == "Guard kimura"

    def test_tag_filter_combined_with_search(self, db, add_video) -> None:
        add_video("Closed guard kimura", ["guard"])
        add_video("Open guard sweeps", ["guard"])
        add_video("Closed guard kimura drill", ["mount"])
        ids = dict(db.query(Tag.name, Tag.id).all())

        videos, total = VideoQueryService.list_videos(
            db, search="kimura", tag_ids=[ids["guard"]]
        )
        assert total == 1
        assert videos[0].title == "Closed guard kimura"

    def test_unknown_tag_matches_nothing(self, db, add_video) -> None:
        add_video("Guard", ["guard"])
        videos, total = VideoQueryService.list_videos(db, tag_ids=[424242])
        assert videos == []
        assert total == 0

    def test_tags_loaded_and_sorted(self, db, add_video) -> None:
        add_video("Tagged", ["kimura", "armbar", "guard"])
        videos, _ = VideoQueryService.list_videos(db)
        assert [tag.name for tag in videos[0].tags] == ["armbar", "guard", "kimura"]

    def test_limit_clamped(self, db, add_video) -> None:
        for n in range(3):
            add_video(f"Video {n}")
        videos, _ = VideoQueryService.list_videos(db, limit=10_000)
        assert len(videos) == 3

    def test_page_below_one_treated_as_first(self, db, add_video) -> None:
        add_video("Only")
        videos, _ = VideoQueryService.list_videos(db, page=0, limit=5)
        assert len(videos) == 1

    def test_page_past_the_end_keeps_total(self, db, add_video) -> None:
        add_video("One")
        add_video("Two")
        for page in (2, 10**20):
            videos, total = VideoQueryService.list_videos(db, page=page, limit=5)
            assert videos == []
            assert total == 2


class TestRecentVideos:
    def test_newest_first_limited(self, db, add_video) -> None:
        for n in range(5):
            add_video(f"Video {n}")
        recent = VideoQueryService.recent_videos(db, limit=2)
        assert [v.title for v in recent] == ["Video 4", "Video 3"]
