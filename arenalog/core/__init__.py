# Core ingestion components

from .errors import ArenaLogError, NotFoundError, ReplayBuildError, RotationWatchError
from .events import EventBus, EventType, IngestionEvent
from .ingest import IngestionConfig, LogIngestionService, SinkResult
from .parser import NoMatch, ParseError, ParseOutcome, classify
from .replay import MatchReplay, MatchReplayBuilder
from .draft import DraftBuilder

__all__ = [
    'ArenaLogError',
    'NotFoundError',
    'ReplayBuildError',
    'RotationWatchError',
    'EventBus',
    'EventType',
    'IngestionEvent',
    'IngestionConfig',
    'LogIngestionService',
    'SinkResult',
    'NoMatch',
    'ParseError',
    'ParseOutcome',
    'classify',
    'MatchReplay',
    'MatchReplayBuilder',
    'DraftBuilder',
]
