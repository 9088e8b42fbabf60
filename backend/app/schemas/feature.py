"""Feature request schemas."""

from typing import Literal

from pydantic import BaseModel, Field

FeatureStatusValue = Literal["open", "planned", "in_progress", "completed"]


class FeatureCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""


class FeatureUpdate(BaseModel):
    status: FeatureStatusValue


class FeatureVoteCreate(BaseModel):
    user_id: str = Field(min_length=1)


class FeatureVoteResponse(BaseModel):
    status: Literal["voted", "already_voted"]
    feature_id: str
    votes_count: int


class CommentCreate(BaseModel):
    author_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class CommentResponse(BaseModel):
    id: str
    feature_id: str
    author_id: str
    content: str
    created_at: str


class FeatureResponse(BaseModel):
    id: str
    app_id: str
    title: str
    description: str
    status: FeatureStatusValue
    created_at: str
    votes_count: int = 0
    comments: list[CommentResponse] = []


class VoteMembershipResponse(BaseModel):
    app_id: str
    user_id: str
    feature_ids: list[str]
