from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ActivityLogCreate(BaseModel):
    """Activity log row to insert."""

    action: str = Field(min_length=1, examples=["new_post"])
    post_id: int | None = Field(default=None, examples=[1])


class ActivityLogResponse(BaseModel):
    """Activity log as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    action: str = Field(examples=["new_post"])
    post_id: int | None = Field(default=None, examples=[1])
    logged_at: datetime
