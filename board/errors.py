"""Errors raised by the feature list.

Network and storage failures belong to the collaborator and never surface here.
"""


class VoteError(Exception):
    """Base class for vote requests the list refuses to forward."""


class AlreadyVotedError(VoteError):
    """The current user already voted for this feature; nothing was submitted."""

    def __init__(self, feature_id: str) -> None:
        super().__init__(f"Already voted for feature {feature_id}")
        self.feature_id = feature_id
