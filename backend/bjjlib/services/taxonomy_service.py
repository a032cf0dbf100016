"""Tag and tag-category administration."""

from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bjjlib.exceptions import ConflictError, NotFoundError, ValidationError
from bjjlib.logger import api_logger
from bjjlib.models.category import TagCategory
from bjjlib.models.tag import Tag, VideoTag
from bjjlib.models.video import Video
from bjjlib.services.tag_normalizer import (
    normalize_category_name,
    normalize_tag_name,
    normalize_tag_names,
)


class TaxonomyService:
    """
    Mutations on tags, categories and video/tag links.

    Every public mutation commits once at the end and rolls back on failure,
    so a caller never observes half of an operation.
    """

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    @staticmethod
    def get_tag(db: Session, tag_id: int) -> Tag:
        """Get a tag by ID or raise NotFoundError."""
        tag = db.get(Tag, tag_id)
        if not tag:
            raise NotFoundError("Tag", tag_id)
        return tag

    @staticmethod
    def find_or_create_tag(db: Session, name: str) -> Tag:
        """
        Insert a tag, or fetch the existing one if the name is taken.

        The unique constraint on tags.name decides the race: the insert runs
        in a SAVEPOINT and a unique violation means another writer got there
        first, so the existing row is re-read. Does not commit.

        Args:
            db: Database session
            name: Already-normalized tag name

        Returns:
            The tag holding that name
        """
        try:
            with db.begin_nested():
                tag = Tag(name=name)
                db.add(tag)
                db.flush()
            return tag
        except IntegrityError:
            tag = db.query(Tag).filter(Tag.name == name).one_or_none()
            if tag is None:
                # The violation was not on the name; let the caller see it
                raise
            return tag

    @staticmethod
    def create_or_get_tag(db: Session, name: str) -> Tag:
        """
        Idempotently create a tag from raw user text.

        "Side Control" and "side control " resolve to the same row.

        Raises:
            ValidationError: If the name is blank
        """
        normalized = normalize_tag_name(name)
        try:
            tag = TaxonomyService.find_or_create_tag(db, normalized)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(tag)
        return tag

    @staticmethod
    def update_tag(
        db: Session,
        tag_id: int,
        name: str | None = None,
        category_id: int | None = None,
        set_category: bool = False,
    ) -> Tag:
        """
        Rename and/or recategorize a tag in a single commit.

        Either both changes land or neither does. Renaming keeps every video
        link; with ``set_category`` the tag moves to ``category_id``, or to
        "uncategorized" when that is None.

        Raises:
            ValidationError: If the new name is blank
            NotFoundError: If the tag or the (non-null) category doesn't exist
            ConflictError: If another tag already has the normalized name
        """
        normalized = normalize_tag_name(name) if name is not None else None
        tag = TaxonomyService.get_tag(db, tag_id)
        if set_category and category_id is not None:
            TaxonomyService.get_category(db, category_id)

        old_name = tag.name
        renamed = normalized is not None and normalized != tag.name
        if renamed:
            existing = (
                db.query(Tag.id).filter(Tag.name == normalized, Tag.id != tag_id).first()
            )
            if existing:
                raise ConflictError(f"Tag '{normalized}' already exists")
            tag.name = normalized

        if set_category:
            tag.category_id = category_id

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            # Lost a race: either the name was taken or the category deleted
            if renamed and db.query(Tag.id).filter(
                Tag.name == normalized, Tag.id != tag_id
            ).first():
                raise ConflictError(f"Tag '{normalized}' already exists")
            raise NotFoundError("Category", category_id)

        if renamed:
            api_logger.info(f"Renamed tag {tag_id}: '{old_name}' -> '{normalized}'")
        db.refresh(tag)
        return tag

    @staticmethod
    def rename_tag(db: Session, tag_id: int, new_name: str) -> Tag:
        """Rename a tag in place, keeping all of its video links."""
        return TaxonomyService.update_tag(db, tag_id, name=new_name)

    @staticmethod
    def recategorize_tag(db: Session, tag_id: int, category_id: int | None) -> Tag:
        """Move a tag into a category, or to "uncategorized" with None."""
        return TaxonomyService.update_tag(
            db, tag_id, category_id=category_id, set_category=True
        )

    @staticmethod
    def delete_tag(db: Session, tag_id: int) -> None:
        """
        Delete a tag together with all of its video links.

        The videos themselves are untouched.
        """
        tag = TaxonomyService.get_tag(db, tag_id)
        name = tag.name
        try:
            removed = (
                db.query(VideoTag)
                .filter(VideoTag.tag_id == tag_id)
                .delete(synchronize_session=False)
            )
            # Links are gone already; don't cascade over a stale collection
            db.expire(tag, ["video_tags"])
            db.delete(tag)
            db.commit()
        except Exception:
            db.rollback()
            raise

        api_logger.info(f"Deleted tag {tag_id} ('{name}') and {removed} video links")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @staticmethod
    def get_category(db: Session, category_id: int) -> TagCategory:
        """Get a category by ID or raise NotFoundError."""
        category = db.get(TagCategory, category_id)
        if not category:
            raise NotFoundError("Category", category_id)
        return category

    @staticmethod
    def list_categories(db: Session) -> List[TagCategory]:
        """Categories in display order (ties broken by ID), tags loaded."""
        return (
            db.query(TagCategory)
            .options(selectinload(TagCategory.tags))
            .order_by(TagCategory.display_order, TagCategory.id)
            .all()
        )

    @staticmethod
    def create_category(db: Session, name: str) -> TagCategory:
        """
        Create a category at the end of the display order.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a category with that name exists
        """
        normalized = normalize_category_name(name)

        if db.query(TagCategory.id).filter(TagCategory.name == normalized).first():
            raise ConflictError(f"Category '{normalized}' already exists")

        max_order = db.query(func.max(TagCategory.display_order)).scalar()
        category = TagCategory(
            name=normalized,
            display_order=0 if max_order is None else max_order + 1,
        )
        db.add(category)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"Category '{normalized}' already exists")

        api_logger.info(f"Created category {category.id} ('{normalized}')")
        db.refresh(category)
        return category

    @staticmethod
    def rename_category(db: Session, category_id: int, name: str) -> TagCategory:
        """
        Rename a category.

        Raises:
            ValidationError: If the name is blank
            NotFoundError: If the category doesn't exist
            ConflictError: If another category has that name
        """
        normalized = normalize_category_name(name)
        category = TaxonomyService.get_category(db, category_id)

        if category.name == normalized:
            return category

        existing = (
            db.query(TagCategory.id)
            .filter(TagCategory.name == normalized, TagCategory.id != category_id)
            .first()
        )
        if existing:
            raise ConflictError(f"Category '{normalized}' already exists")

        category.name = normalized
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"Category '{normalized}' already exists")

        db.refresh(category)
        return category

    @staticmethod
    def move_category(db: Session, category_id: int, delta: int) -> List[TagCategory]:
        """
        Move a category one place up (-1) or down (+1) in the display order.

        The category swaps places with its neighbor in (display_order, id)
        order and the whole list is renumbered 0..n-1 in the same
        transaction, so gaps or duplicate orders left behind by deletes are
        repaired as a side effect. Rows are locked where the backend
        supports it. Moving past either end leaves the order unchanged.

        Args:
            db: Database session
            category_id: Category to move
            delta: -1 (up) or +1 (down)

        Returns:
            All categories in their new order

        Raises:
            ValidationError: If delta is not -1 or +1
            NotFoundError: If the category doesn't exist
        """
        if delta not in (-1, 1):
            raise ValidationError("Categories move one position at a time (-1 or +1)")

        try:
            ordered = (
                db.query(TagCategory)
                .order_by(TagCategory.display_order, TagCategory.id)
                .with_for_update()
                .all()
            )
            position = next(
                (i for i, category in enumerate(ordered) if category.id == category_id),
                None,
            )
            if position is None:
                raise NotFoundError("Category", category_id)

            target = position + delta
            if 0 <= target < len(ordered):
                ordered[position], ordered[target] = ordered[target], ordered[position]

            for index, category in enumerate(ordered):
                if category.display_order != index:
                    category.display_order = index

            db.commit()
        except Exception:
            db.rollback()
            raise

        return TaxonomyService.list_categories(db)

    @staticmethod
    def delete_category(db: Session, category_id: int) -> None:
        """
        Delete a category; its tags survive as uncategorized.

        The tags are detached and the category removed in one transaction.
        """
        category = TaxonomyService.get_category(db, category_id)
        name = category.name
        try:
            detached = (
                db.query(Tag)
                .filter(Tag.category_id == category_id)
                .update({Tag.category_id: None}, synchronize_session=False)
            )
            db.delete(category)
            db.commit()
        except Exception:
            db.rollback()
            raise

        api_logger.info(
            f"Deleted category {category_id} ('{name}'), {detached} tags uncategorized"
        )

    # ------------------------------------------------------------------
    # Video/tag links
    # ------------------------------------------------------------------

    @staticmethod
    def apply_video_tags(db: Session, video: Video, tag_names: List[str]) -> None:
        """
        Reconcile a video's links with a full replacement list of names.

        Afterwards the video is linked to exactly the given (normalized) tags:
        stale links are removed, missing ones added, shared ones kept. Tags
        are found or created by name. Does not commit.

        Raises:
            ValidationError: If any name is blank (before anything changes)
        """
        normalized = normalize_tag_names(tag_names)

        wanted_ids = {TaxonomyService.find_or_create_tag(db, name).id for name in normalized}
        links = db.query(VideoTag).filter(VideoTag.video_id == video.id).all()
        linked_ids = {link.tag_id for link in links}

        for link in links:
            if link.tag_id not in wanted_ids:
                db.delete(link)

        for tag_id in wanted_ids - linked_ids:
            db.add(VideoTag(video_id=video.id, tag_id=tag_id))

        db.flush()
        db.expire(video, ["tags", "video_tags"])

    @staticmethod
    def sync_video_tags(db: Session, video_id: int, tag_names: List[str]) -> Video:
        """
        Replace the tag set of a video.

        Raises:
            NotFoundError: If the video doesn't exist
            ValidationError: If any name is blank
        """
        video = db.get(Video, video_id)
        if not video:
            raise NotFoundError("Video", video_id)

        try:
            TaxonomyService.apply_video_tags(db, video, tag_names)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(video)
        return video
