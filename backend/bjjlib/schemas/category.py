from typing import Literal

from pydantic import BaseModel, ConfigDict

from bjjlib.schemas.tag import TagSummary


class CategoryBase(BaseModel):
    """Base category schema."""

    name: str


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""

    pass


class CategoryUpdate(CategoryBase):
    """Schema for renaming a category."""

    pass


class CategoryMove(BaseModel):
    """Move a category one position in the display order."""

    direction: Literal["up", "down"]

    @property
    def delta(self) -> int:
        return -1 if self.direction == "up" else 1


class CategoryResponse(CategoryBase):
    """Category response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    display_order: int
    tags: list[TagSummary] = []
