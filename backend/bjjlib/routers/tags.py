"""Tags router: catalog, co-occurrence facets and tag administration."""

from typing import Annotated, List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from bjjlib.database import get_db, snapshot_read
from bjjlib.dependencies import get_current_admin
from bjjlib.models.admin_session import AdminSession
from bjjlib.schemas.tag import TagCreate, TagResponse, TagUpdate, TagWithCountResponse
from bjjlib.services.cooccurrence_service import CooccurrenceService
from bjjlib.services.taxonomy_service import TaxonomyService
from bjjlib.utils.params import parse_id_list

router = APIRouter(prefix="/tags")


def _with_counts(rows) -> List[dict]:
    return [
        {
            "id": tag.id,
            "name": tag.name,
            "category_id": tag.category_id,
            "video_count": count,
        }
        for tag, count in rows
    ]


@router.get("", response_model=List[TagWithCountResponse])
async def get_tags(db: Annotated[Session, Depends(get_db)]):
    """
    Get every tag with its category and video count.

    Returns tags in alphabetical order.
    """
    return _with_counts(CooccurrenceService.all_tags_with_counts(db))


@router.get("/co-occurring", response_model=List[TagWithCountResponse])
async def get_co_occurring_tags(
    db: Annotated[Session, Depends(get_db)],
    tag_ids: str | None = Query(
        None, alias="tagIds", description="Comma-separated selected tag IDs"
    ),
):
    """
    Get the tags that can narrow the current selection further.

    Each returned tag is carried by some, but not all, of the videos that
    match every selected tag; ``video_count`` is counted within that set.
    Without a selection the whole catalog is returned.
    """
    with snapshot_read(db):
        rows = CooccurrenceService.available_tags(db, parse_id_list(tag_ids))
        return _with_counts(rows)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    body: TagCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Create a tag, or return the existing one with the same normalized name."""
    return TaxonomyService.create_or_get_tag(db, body.name)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: int,
    body: TagUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """
    Rename and/or recategorize a tag.

    Renaming keeps every video link. ``"category_id": null`` moves the tag
    to uncategorized; leaving the field out keeps the current category.
    """
    return TaxonomyService.update_tag(
        db,
        tag_id,
        name=body.name,
        category_id=body.category_id,
        set_category="category_id" in body.model_fields_set,
    )


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Delete a tag; it is removed from every video, the videos stay."""
    TaxonomyService.delete_tag(db, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
