"""Project Pydantic schemas — the camelCase row returned by the API."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProjectOut(BaseModel):
    """A stored project as the browser sees it."""
    id: int
    project_idea: str = Field(alias="projectIdea")
    ai_response: str = Field(alias="aiResponse")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    user_id: str = Field(alias="userId")

    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite's CURRENT_TIMESTAMP is UTC but comes back naive.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
