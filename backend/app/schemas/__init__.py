from backend.app.schemas.feature import (
    CommentCreate,
    CommentResponse,
    FeatureCreate,
    FeatureResponse,
    FeatureUpdate,
    FeatureVoteCreate,
    FeatureVoteResponse,
    VoteMembershipResponse,
)

__all__ = [
    "FeatureCreate",
    "FeatureUpdate",
    "FeatureVoteCreate",
    "FeatureVoteResponse",
    "FeatureResponse",
    "CommentCreate",
    "CommentResponse",
    "VoteMembershipResponse",
]
