"""Client-side feature records, validated from the backend's JSON."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class FeatureStatus(str, Enum):
    OPEN = "open"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    feature_id: str
    author_id: str
    content: str
    created_at: datetime


class Feature(BaseModel):
    """A feature request as published by the collaborator. Read-only to the list."""

    model_config = ConfigDict(frozen=True)

    id: str
    app_id: str = ""
    title: str
    description: str = ""
    votes_count: int = 0
    created_at: datetime
    status: FeatureStatus = FeatureStatus.OPEN
    comments: tuple[Comment, ...] | None = None

    @property
    def comment_count(self) -> int:
        return len(self.comments) if self.comments else 0
