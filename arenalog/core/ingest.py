"""
Log ingestion service.

LogIngestionService owns everything with a lifetime: the log reader, the
match and draft builders, the sinks, and the loop that drives them. Each
iteration it drains whatever the log has gained since the last one, then
waits for the first of three things: the next poll tick, a rotation
notice from the RotationWatcher, or a shutdown request.

Usage:
    config = IngestionConfig("/path/to/Player.log").with_follow(False)
    service = (
        LogIngestionService(config)
        .add_writer(DirectoryStorage("matches"))
        .with_event_callback(print)
        .with_shutdown()
    )
    asyncio.run(service.start())
"""
import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config.config_manager import IngestionConfig
from .draft import DraftBuilder
from .errors import DraftBuildError, ReplayBuildError, RotationWatchError
from .events import EventCallback, EventType, IngestionEvent
from .log_reader import PlayerLogReader
from .messages import DraftNotify, TelemetryEvent
from .parser import ParseError, classify
from .ports import DraftWriter, ReplayWriter
from .replay import MatchReplay, MatchReplayBuilder

logger = logging.getLogger(__name__)

__all__ = [
    'IngestionConfig', 'IngestionStats', 'LogIngestionService', 'RotationWatcher', 'SinkResult',
]


@dataclass
class SinkResult:
    """Outcome of handing one aggregate to one sink."""
    sink: str
    ok: bool
    error: Optional[str] = None


@dataclass
class IngestionStats:
    candidates_read: int = 0
    parse_errors: int = 0
    matches_completed: int = 0
    matches_dropped: int = 0
    drafts_completed: int = 0
    drafts_dropped: int = 0
    sink_failures: int = 0
    rotations: int = 0


class RotationWatcher:
    """
    Polls the log path for replacement or truncation.

    Arena replaces Player.log on restart (new inode). On Windows the inode
    can stay the same while the file is truncated, so a size smaller than
    the last one seen also counts as a rotation. Each rotation puts one
    item on ``queue``.
    """

    def __init__(self, log_path: str, interval: float):
        self.log_path = log_path
        self.interval = interval
        self.queue: "asyncio.Queue[None]" = None
        self._inode: Optional[int] = None
        self._size = 0
        self._missing = False
        self._task: Optional[asyncio.Task] = None

    def start(self) -> "asyncio.Queue[None]":
        """Begin watching. Must be called from a running event loop."""
        parent = os.path.dirname(os.path.abspath(self.log_path))
        if not os.path.isdir(parent):
            raise RotationWatchError(f"Cannot watch {self.log_path}: directory {parent} does not exist")
        try:
            stat = os.stat(self.log_path)
        except OSError as e:
            raise RotationWatchError(f"Cannot watch {self.log_path}: {e}") from e

        self._inode = stat.st_ino
        self._size = stat.st_size
        self.queue = asyncio.Queue()
        self._task = asyncio.create_task(self._run())
        logger.debug(f"Watching {self.log_path} for rotation (inode {self._inode})")
        return self.queue

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            self.check()

    def check(self) -> bool:
        """Stat the log once; queue a notice and return True if it rotated."""
        try:
            stat = os.stat(self.log_path)
        except FileNotFoundError:
            if not self._missing:
                logger.warning(f"Log file not found at {self.log_path}. Waiting...")
            self._missing = True
            return False
        except OSError as e:
            logger.error(f"Error getting inode for {self.log_path}: {e}")
            return False

        rotated = self._missing or stat.st_ino != self._inode or stat.st_size < self._size
        if rotated:
            logger.info(
                f"Log rotation detected: inode {self._inode} -> {stat.st_ino}, "
                f"size {self._size} -> {stat.st_size}"
            )
            self.queue.put_nowait(None)
        self._inode = stat.st_ino
        self._size = stat.st_size
        self._missing = False
        return rotated

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


class LogIngestionService:
    """
    Tails Player.log and turns it into completed match replays and drafts.

    All mutable state belongs to the task running ``start()``; nothing here
    is shared with other tasks except the shutdown request.
    """

    def __init__(self, config: IngestionConfig):
        self.config = config
        # Raises FileNotFoundError if the log doesn't exist
        self.reader = PlayerLogReader(config.player_log_path)
        self.match_replay_builder = MatchReplayBuilder()
        self.draft_builder = DraftBuilder()
        self.writers: List[ReplayWriter] = []
        self.draft_writers: List[DraftWriter] = []
        self.event_callback: Optional[EventCallback] = None
        self.stats = IngestionStats()

        self._handle_signals = False
        self._reader_pending = False
        self._previous_handlers: Dict[int, Any] = {}
        self._shutdown_requested = False
        self._shutdown: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    # --- configuration ----------------------------------------------------

    def add_writer(self, writer: ReplayWriter) -> "LogIngestionService":
        self.writers.append(writer)
        return self

    def add_draft_writer(self, writer: DraftWriter) -> "LogIngestionService":
        self.draft_writers.append(writer)
        return self

    def with_event_callback(self, callback: EventCallback) -> "LogIngestionService":
        self.event_callback = callback
        return self

    def with_shutdown(self) -> "LogIngestionService":
        """Stop gracefully on SIGINT/SIGTERM once ``start()`` is running."""
        self._handle_signals = True
        return self

    def request_shutdown(self):
        """Ask the loop to stop after the current iteration. Safe from any thread."""
        self._shutdown_requested = True
        if self._loop is not None and self._shutdown is not None:
            self._loop.call_soon_threadsafe(self._shutdown.set)

    # --- event handling ---------------------------------------------------

    def emit_event(self, event_type: EventType, data=None):
        if self.event_callback is None:
            return
        try:
            self.event_callback(IngestionEvent(event_type=event_type, data=data, source=self.config.player_log_path))
        except Exception as e:
            logger.error(f"Error in event callback for {event_type.name}: {e}", exc_info=True)

    async def process_parse_output(self, outcome):
        """Route one parse outcome to the builders and flush anything that completed."""
        if isinstance(outcome, ParseError):
            self.stats.parse_errors += 1
            logger.debug(f"Parse error: {outcome.reason}")
            self.emit_event(EventType.PARSE_ERROR, outcome.reason)
            return

        if isinstance(outcome, DraftNotify):
            self.emit_event(EventType.DRAFT_NOTIFY, outcome)
        elif isinstance(outcome, TelemetryEvent):
            self.emit_event(EventType.BUSINESS, outcome)
            if self.draft_builder.ingest(outcome):
                await self._complete_draft()

        if self.match_replay_builder.ingest(outcome):
            await self._complete_match()

    async def _complete_match(self):
        try:
            replay = self.match_replay_builder.build()
        except ReplayBuildError as e:
            self.stats.matches_dropped += 1
            logger.error(f"Error building match replay: {e}")
            return

        results = await self.write_replay(replay)
        self.stats.matches_completed += 1
        logger.info(
            f"Match {replay.match_id} complete: {len(replay.client_server_messages)} messages, "
            f"{sum(1 for r in results if r.ok)}/{len(results)} sinks written"
        )
        self.emit_event(EventType.MATCH_COMPLETED, replay)

    async def _complete_draft(self):
        try:
            draft = self.draft_builder.build()
        except DraftBuildError as e:
            self.stats.drafts_dropped += 1
            logger.error(f"Error building draft: {e}")
            return

        await self.write_draft(draft)
        self.stats.drafts_completed += 1
        logger.info(f"Draft {draft.draft_id} complete: {len(draft.picks)} picks")
        self.emit_event(EventType.DRAFT_COMPLETED, draft)

    async def write_replay(self, replay: MatchReplay) -> List[SinkResult]:
        """Hand a replay to every writer in order. One failing writer doesn't stop the rest."""
        return await self._fan_out(self.writers, replay, "match replay")

    async def write_draft(self, draft) -> List[SinkResult]:
        return await self._fan_out(self.draft_writers, draft, "draft")

    async def _fan_out(self, sinks, aggregate, label: str) -> List[SinkResult]:
        results = []
        for sink in sinks:
            name = type(sink).__name__
            try:
                await sink.write(aggregate)
                results.append(SinkResult(sink=name, ok=True))
            except Exception as e:
                self.stats.sink_failures += 1
                logger.error(f"Error writing {label} to {name}: {e}", exc_info=True)
                results.append(SinkResult(sink=name, ok=False, error=str(e)))
        return results

    async def process_available_events(self) -> bool:
        """Drain the log. Returns True if anything was read."""
        if self._reader_pending and not self._reopen_reader():
            return False
        candidates = self.reader.read_available()
        self.stats.candidates_read += len(candidates)
        for text in candidates:
            await self.process_parse_output(classify(text))
        return bool(candidates)

    async def handle_rotation(self):
        logger.info("Log file rotated, reinitializing reader")
        self.reader.close()
        self.match_replay_builder.abandon()
        self.stats.rotations += 1
        self.emit_event(EventType.LOG_ROTATED)
        self._reader_pending = True
        if not self._reopen_reader():
            logger.warning(f"Log file missing after rotation, will retry: {self.config.player_log_path}")

    def _reopen_reader(self) -> bool:
        try:
            self.reader = PlayerLogReader(self.config.player_log_path)
        except FileNotFoundError:
            logger.debug(f"Log file not there yet: {self.config.player_log_path}")
            return False
        self._reader_pending = False
        return True

    # --- main loop --------------------------------------------------------

    async def start(self):
        """
        Run until shutdown, or until an idle poll when ``follow`` is False.

        Raises RotationWatchError if rotation watching is enabled but can't
        be set up.
        """
        self._loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        if self._shutdown_requested:
            self._shutdown.set()

        watcher = None
        installed = []
        try:
            if self.config.watch_rotation:
                watcher = RotationWatcher(self.config.player_log_path, self.config.poll_interval)
                watcher.start()
            if self._handle_signals:
                installed = self._install_signal_handlers()
            logger.info(f"Starting log ingestion from: {self.config.player_log_path}")

            while not self._shutdown.is_set():
                has_events = await self.process_available_events()
                if not self.config.follow and not has_events:
                    logger.info("Finished processing log (follow=false)")
                    break

                source = await self._wait_next(watcher)
                if source == "shutdown":
                    logger.info("Received shutdown signal")
                    break
                if source == "rotation":
                    await self.handle_rotation()
        finally:
            if watcher is not None:
                await watcher.stop()
            self._remove_signal_handlers(installed)
            self.reader.close()
            self._loop = None
        logger.info(f"Ingestion stopped: {self.stats}")

    async def _wait_next(self, watcher: Optional[RotationWatcher]) -> str:
        waiters = {
            asyncio.ensure_future(asyncio.sleep(self.config.poll_interval)): "tick",
            asyncio.ensure_future(self._shutdown.wait()): "shutdown",
        }
        if watcher is not None:
            waiters[asyncio.ensure_future(watcher.queue.get())] = "rotation"

        done, pending = await asyncio.wait(list(waiters), return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        fired = {waiters[task] for task in done}
        for source in ("shutdown", "rotation", "tick"):
            if source in fired:
                # A rotation notice that lost the race must not be dropped
                if source != "rotation" and "rotation" in fired:
                    watcher.queue.put_nowait(None)
                return source
        return "tick"

    def _install_signal_handlers(self) -> List[int]:
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                self._loop.add_signal_handler(sig, self.request_shutdown)
                installed.append(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                # Windows event loops don't support add_signal_handler
                self._previous_handlers[sig] = signal.getsignal(sig)
                signal.signal(sig, lambda signum, frame: self.request_shutdown())
        return installed

    def _remove_signal_handlers(self, installed: List[int]):
        for sig in installed:
            self._loop.remove_signal_handler(sig)
        for sig, previous in self._previous_handlers.items():
            signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
        self._previous_handlers = {}
