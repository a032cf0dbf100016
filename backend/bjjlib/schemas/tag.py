from pydantic import BaseModel, ConfigDict


class TagBase(BaseModel):
    """Base tag schema."""

    name: str


class TagCreate(TagBase):
    """Schema for creating a tag (find-or-create by normalized name)."""

    pass


class TagSummary(TagBase):
    """Tag as embedded in a video."""

    model_config = ConfigDict(from_attributes=True)

    id: int


class TagResponse(TagSummary):
    """Tag response schema."""

    category_id: int | None = None


class TagWithCountResponse(TagResponse):
    """Tag with the number of videos carrying it (within the current filter)."""

    video_count: int = 0


class TagUpdate(BaseModel):
    """
    Schema for updating a tag.

    Omitted fields are left alone; an explicit ``"category_id": null`` moves
    the tag to uncategorized.
    """

    name: str | None = None
    category_id: int | None = None
