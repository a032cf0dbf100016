"""Tag co-occurrence engine: AND-filtering and next-available tag facets."""

from typing import Iterable, List, Set, Tuple

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.orm import Session

from bjjlib.models.tag import Tag, VideoTag
from bjjlib.utils.params import is_storable_id


class CooccurrenceService:
    """
    Set algebra over the video/tag incidence table.

    Operation A (``matching_video_ids``) is the intersection of the video sets
    of every selected tag. Operation B (``available_tags``) lists the tags that
    would narrow that intersection further if added to the selection.
    """

    @staticmethod
    def selection(tag_ids: Iterable[int]) -> Set[int]:
        """Selections are sets: duplicates and ordering carry no meaning."""
        return set(tag_ids)

    @staticmethod
    def storable_ids(selected: Set[int]) -> List[int]:
        """Selected IDs that can exist in the table; only these are bound into SQL."""
        return sorted(tag_id for tag_id in selected if is_storable_id(tag_id))

    @staticmethod
    def matching_videos_query(tag_ids: Iterable[int]) -> Select:
        """
        Build the SELECT of video IDs that carry every tag in the selection.

        A video qualifies iff the number of distinct selected tags linked to
        it equals the size of the selection. Unknown tag IDs can never be
        matched, so they leave the result empty. IDs outside the column range
        are left out of the IN list but still count towards the selection size.

        Args:
            tag_ids: Non-empty selection of tag IDs

        Returns:
            SELECT producing a single ``video_id`` column
        """
        selected = CooccurrenceService.selection(tag_ids)
        if not selected:
            raise ValueError("matching_videos_query needs a non-empty selection")

        return (
            select(VideoTag.video_id)
            .where(VideoTag.tag_id.in_(CooccurrenceService.storable_ids(selected)))
            .group_by(VideoTag.video_id)
            .having(func.count(distinct(VideoTag.tag_id)) == len(selected))
            .correlate(None)
        )

    @staticmethod
    def matching_video_ids(db: Session, tag_ids: Iterable[int]) -> Set[int]:
        """
        Operation A: IDs of the videos associated with every selected tag.

        An empty selection means "no filter" and callers skip this call; it is
        answered here with an empty set rather than every video.
        """
        selected = CooccurrenceService.selection(tag_ids)
        if not selected:
            return set()

        query = CooccurrenceService.matching_videos_query(selected)
        return set(db.execute(query).scalars().all())

    @staticmethod
    def available_tags(db: Session, tag_ids: Iterable[int]) -> List[Tuple[Tag, int]]:
        """
        Operation B: tags worth offering as the next filter, with counts.

        For a non-empty selection S with matching set V, a tag t outside S is
        returned iff 0 < count(t in V) < |V|. A tag carried by every video in
        V cannot narrow the result and is left out. The count and |V| are
        computed in one statement so they come from the same snapshot.

        An empty selection returns the whole catalog, each tag with its total
        video count (including zero).

        Args:
            db: Database session
            tag_ids: Currently selected tag IDs

        Returns:
            (tag, video_count) pairs ordered by tag name
        """
        selected = CooccurrenceService.selection(tag_ids)
        if not selected:
            return CooccurrenceService.all_tags_with_counts(db)

        matching = CooccurrenceService.matching_videos_query(selected)
        matching_total = (
            select(func.count()).select_from(matching.subquery()).scalar_subquery()
        )
        video_count = func.count(distinct(VideoTag.video_id))

        rows = (
            db.query(Tag, video_count)
            .join(VideoTag, VideoTag.tag_id == Tag.id)
            .filter(VideoTag.video_id.in_(matching))
            .filter(Tag.id.notin_(CooccurrenceService.storable_ids(selected)))
            .group_by(Tag.id)
            .having(video_count < matching_total)
            .all()
        )

        # Ordinal sort: database collations may be locale-aware
        return sorted(((tag, count) for tag, count in rows), key=lambda row: row[0].name)

    @staticmethod
    def all_tags_with_counts(db: Session) -> List[Tuple[Tag, int]]:
        """Every tag with the number of videos carrying it, ordered by name."""
        rows = (
            db.query(Tag, func.count(VideoTag.id))
            .outerjoin(VideoTag, VideoTag.tag_id == Tag.id)
            .group_by(Tag.id)
            .all()
        )
        return sorted(((tag, count) for tag, count in rows), key=lambda row: row[0].name)
