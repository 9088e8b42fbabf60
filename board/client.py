"""The collaborator that owns every feature-board I/O.

``FeatureClient`` is the contract the list view-model consumes. ``HttpFeatureClient``
implements it against the FeatureFlow backend: it keeps the published snapshot
(features + vote membership), replaces it wholesale on every fetch and tells
subscribers whenever it changes.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

import httpx

from board.models import Feature
from board.observable import Listener, Observable

logger = logging.getLogger(__name__)


class FeatureClient(Protocol):
    @property
    def features(self) -> Sequence[Feature]: ...

    @property
    def is_loading(self) -> bool: ...

    async def fetch_features(self, app_id: str) -> None: ...

    def has_voted_for_feature(self, feature_id: str) -> bool: ...

    async def upvote_feature(self, feature: Feature) -> None: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


class HttpFeatureClient(Observable):
    """Feature board collaborator backed by the REST API."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        *,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__()
        self.user_id = user_id
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._features: tuple[Feature, ...] = ()
        self._voted: set[str] = set()
        # feature id -> votes_count the backend reported for our own vote
        self._confirmed_votes: dict[str, int] = {}
        self._fetches_in_flight = 0
        self.last_error: str | None = None

    async def __aenter__(self) -> "HttpFeatureClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    @property
    def features(self) -> tuple[Feature, ...]:
        return self._features

    @property
    def voted_feature_ids(self) -> frozenset[str]:
        return frozenset(self._voted)

    @property
    def is_loading(self) -> bool:
        return self._fetches_in_flight > 0

    def has_voted_for_feature(self, feature_id: str) -> bool:
        return feature_id in self._voted

    def _record_failure(self, message: str, exc: Exception) -> None:
        logger.warning("%s: %s", message, exc)
        self.last_error = str(exc) or type(exc).__name__

    async def fetch_features(self, app_id: str) -> None:
        """Replace the snapshot and vote membership with the board's current state.

        Votes confirmed by the backend are merged back in, so a fetch that was
        already in flight when a vote landed cannot roll it back. On failure the
        previous snapshot stays published and ``last_error`` is set.
        """
        self._fetches_in_flight += 1
        self._notify()
        try:
            resp = await self._http.get(f"/api/apps/{app_id}/features")
            resp.raise_for_status()
            features = tuple(Feature.model_validate(item) for item in resp.json())

            resp = await self._http.get(
                f"/api/apps/{app_id}/votes", params={"user_id": self.user_id}
            )
            resp.raise_for_status()
            voted = set(resp.json()["feature_ids"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            self._record_failure(f"Fetching features for {app_id} failed", exc)
        else:
            voted |= self._confirmed_votes.keys()
            self._features = tuple(
                f.model_copy(update={"votes_count": self._confirmed_votes[f.id]})
                if self._confirmed_votes.get(f.id, -1) > f.votes_count
                else f
                for f in features
            )
            self._voted = voted
            self.last_error = None
            logger.debug(
                "Fetched %d features for %s (%d voted)", len(features), app_id, len(voted)
            )
        finally:
            self._fetches_in_flight -= 1
            self._notify()

    async def upvote_feature(self, feature: Feature) -> None:
        """Submit one vote and fold the backend's reply into the snapshot.

        The backend applies at most one vote per (user, feature), so a repeated
        call only refreshes the count.
        """
        try:
            resp = await self._http.post(
                f"/api/features/{feature.id}/vote", json={"user_id": self.user_id}
            )
            resp.raise_for_status()
            reply = resp.json()
            status = reply["status"]
            votes_count = int(reply["votes_count"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            self._record_failure(f"Voting for {feature.id} failed", exc)
            return

        logger.info("Vote for %s: %s (%d)", feature.id, status, votes_count)
        self._confirmed_votes[feature.id] = max(
            votes_count, self._confirmed_votes.get(feature.id, 0)
        )
        self._voted.add(feature.id)
        self._features = tuple(
            f.model_copy(update={"votes_count": max(f.votes_count, votes_count)})
            if f.id == feature.id
            else f
            for f in self._features
        )
        self.last_error = None
        self._notify()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
