"""Feature list view-model: search, sort and vote state over the collaborator's snapshot."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from board.client import FeatureClient
from board.errors import AlreadyVotedError
from board.models import Feature
from board.observable import Observable

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    VOTES = "votes"  # votes_count, highest first
    DATE = "date"  # created_at, newest first


class ListState(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"  # the board has no features yet
    NO_RESULTS = "no_results"  # the search matched nothing
    READY = "ready"


@dataclass(frozen=True)
class FeatureRow:
    id: str
    title: str
    description: str
    votes_count: int
    status_label: str
    comment_count: int
    created_at: datetime
    has_voted: bool

    @property
    def can_vote(self) -> bool:
        return not self.has_voted


def _matches(feature: Feature, needle: str) -> bool:
    return needle in feature.title.casefold() or needle in feature.description.casefold()


class FeatureListViewModel(Observable):
    """Derives the visible feature list and forwards votes to the collaborator.

    The view-model never writes to the collaborator's features or vote
    membership; it only reads the published snapshot and re-derives on demand.
    """

    def __init__(self, client: FeatureClient, app_id: str) -> None:
        super().__init__()
        self._client = client
        self.app_id = app_id
        self._search_text = ""
        self._sort_key = SortKey.VOTES
        self._unsubscribe = client.subscribe(self._notify)

    # --- state ---

    @property
    def search_text(self) -> str:
        return self._search_text

    @search_text.setter
    def search_text(self, value: str) -> None:
        if value != self._search_text:
            self._search_text = value
            self._notify()

    @property
    def sort_key(self) -> SortKey:
        return self._sort_key

    @sort_key.setter
    def sort_key(self, value: SortKey) -> None:
        value = SortKey(value)
        if value != self._sort_key:
            self._sort_key = value
            self._notify()

    def clear_search(self) -> None:
        self.search_text = ""

    # --- change notification ---

    def close(self) -> None:
        self._unsubscribe()
        self._listeners.clear()

    # --- derivation ---

    def visible_features(self, features: Sequence[Feature]) -> list[Feature]:
        """Filter by the search text, then sort by the sort key.

        ``sorted`` is stable with ``reverse=True`` too, so ties keep input order.
        """
        needle = self._search_text.casefold()
        if needle:
            features = [f for f in features if _matches(f, needle)]

        if self._sort_key is SortKey.VOTES:
            return sorted(features, key=lambda f: f.votes_count, reverse=True)
        return sorted(features, key=lambda f: f.created_at, reverse=True)

    def list_state(self, features: Sequence[Feature] | None = None) -> ListState:
        if self._client.is_loading:
            return ListState.LOADING
        if features is None:
            features = self._client.features
        if self.visible_features(features):
            return ListState.READY
        return ListState.NO_RESULTS if self._search_text else ListState.EMPTY

    def rows(self) -> list[FeatureRow]:
        return [
            FeatureRow(
                id=f.id,
                title=f.title,
                description=f.description,
                votes_count=f.votes_count,
                status_label=f.status.display_name,
                comment_count=f.comment_count,
                created_at=f.created_at,
                has_voted=self.has_voted(f.id),
            )
            for f in self.visible_features(self._client.features)
        ]

    # --- actions ---

    def has_voted(self, feature_id: str) -> bool:
        return self._client.has_voted_for_feature(feature_id)

    async def request_upvote(self, feature: Feature) -> None:
        """Forward an upvote unless the user has already voted.

        The membership check is only a shortcut for the UI; the backend is what
        guarantees one vote per user and feature.
        """
        if self.has_voted(feature.id):
            logger.debug("Skipping upvote for %s: already voted", feature.id)
            raise AlreadyVotedError(feature.id)
        await self._client.upvote_feature(feature)

    async def activate(self) -> None:
        await self._client.fetch_features(self.app_id)

    async def refresh(self) -> None:
        await self._client.fetch_features(self.app_id)
