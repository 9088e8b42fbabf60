from board.client import FeatureClient, HttpFeatureClient
from board.errors import AlreadyVotedError, VoteError
from board.models import Comment, Feature, FeatureStatus
from board.viewmodel import FeatureListViewModel, FeatureRow, ListState, SortKey

__all__ = [
    "Feature",
    "FeatureStatus",
    "Comment",
    "FeatureClient",
    "HttpFeatureClient",
    "FeatureListViewModel",
    "FeatureRow",
    "ListState",
    "SortKey",
    "VoteError",
    "AlreadyVotedError",
]
