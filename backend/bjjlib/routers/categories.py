"""Categories router for grouping and ordering tags."""

from typing import Annotated, List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from bjjlib.database import get_db
from bjjlib.dependencies import get_current_admin
from bjjlib.models.admin_session import AdminSession
from bjjlib.schemas.category import (
    CategoryCreate,
    CategoryMove,
    CategoryResponse,
    CategoryUpdate,
)
from bjjlib.services.taxonomy_service import TaxonomyService

router = APIRouter(prefix="/categories")


@router.get("", response_model=List[CategoryResponse])
async def get_categories(db: Annotated[Session, Depends(get_db)]):
    """
    Get all categories in display order with their tags.

    Tags without a category are not listed here; see GET /tags.
    """
    return TaxonomyService.list_categories(db)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Create a category at the end of the display order."""
    return TaxonomyService.create_category(db, body.name)


@router.put("/{category_id}", response_model=CategoryResponse)
async def rename_category(
    category_id: int,
    body: CategoryUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Rename a category."""
    return TaxonomyService.rename_category(db, category_id, body.name)


@router.post("/{category_id}/move", response_model=List[CategoryResponse])
async def move_category(
    category_id: int,
    body: CategoryMove,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """
    Move a category one place up or down.

    Returns the full category listing in its new order.
    """
    return TaxonomyService.move_category(db, category_id, body.delta)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[AdminSession, Depends(get_current_admin)],
):
    """Delete a category; its tags become uncategorized."""
    TaxonomyService.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
