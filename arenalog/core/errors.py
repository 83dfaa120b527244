"""
Exception taxonomy for log ingestion.

Per-line decode failures never escape the classifier (they become
``ParseError`` outcomes). Replay and draft build failures drop the
aggregate. Only ``RotationWatchError`` is fatal to the ingestion loop.
"""
from typing import Optional


class ArenaLogError(Exception):
    """Base class for all arenalog errors."""


class MessageDecodeError(ArenaLogError):
    """A tagged message was recognised but its payload did not decode."""


class ReplayBuildError(ArenaLogError):
    """A match context could not be turned into a MatchReplay."""


class MissingMatchIdError(ReplayBuildError):
    def __init__(self):
        super().__init__("Match context has no match id")


class MissingStartBoundaryError(ReplayBuildError):
    def __init__(self):
        super().__init__("Match context has no start event")


class MissingEndBoundaryError(ReplayBuildError):
    def __init__(self):
        super().__init__("Match context has no end event")


class BoundaryMismatchError(ReplayBuildError):
    def __init__(self, start_id: str, end_id: Optional[str]):
        self.start_id = start_id
        self.end_id = end_id
        super().__init__(f"Match end event {end_id!r} does not match start event {start_id!r}")


class ControllerSeatNotFoundError(ReplayBuildError):
    def __init__(self):
        super().__init__("Controller seat id not found (no ConnectResp with seat ids)")


class NotFoundError(ArenaLogError):
    """A derivation's prerequisite data is missing from the replay."""

    def __init__(self, what: str):
        self.what = what
        super().__init__(f"{what} not found")


class DraftBuildError(ArenaLogError):
    """A draft context could not be turned into a DraftResult."""


class RotationWatchError(ArenaLogError):
    """The rotation watcher could not be set up; ingestion must stop."""
