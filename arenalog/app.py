"""
Command-line runner: tail Player.log and write each finished match and
draft to a directory as JSON.
"""
import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from .config.config_manager import IngestionConfig, RunnerPreferences
from .core.errors import RotationWatchError
from .core.events import EventBus, EventType, IngestionEvent
from .core.ingest import LogIngestionService
from .core.match_details import MatchDetails
from .core.version import get_version
from .data.arena_cards import ArenaCardDatabase, StaticCardLookup
from .data.directory_storage import DirectoryStorage, DraftDirectoryStorage

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_dir: Path = Path("logs")):
    """Log to logs/arenalog.log and the console."""
    log_dir.mkdir(exist_ok=True)
    log_file_path = log_dir / "arenalog.log"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file_path, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconstruct MTG Arena matches and drafts from Player.log")
    parser.add_argument("--log", dest="player_log", help="Path to Player.log (default: auto-detect)")
    parser.add_argument("--follow", dest="follow", action="store_true", default=None,
                        help="Keep watching the log for new matches (default)")
    parser.add_argument("--no-follow", dest="follow", action="store_false",
                        help="Process what's in the log and exit")
    parser.add_argument("--poll-interval", type=float, help="Seconds between polls")
    parser.add_argument("--no-rotation-watch", action="store_true", help="Don't watch for log rotation")
    parser.add_argument("--output-dir", help="Directory for match replay JSON files")
    parser.add_argument("--draft-output-dir", help="Directory for draft JSON files")
    parser.add_argument("--cards-db", help="SQLite card database (enables match summaries)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--version", action="version", version=f"arenalog {get_version()}")
    return parser


def build_config(args: argparse.Namespace, prefs: RunnerPreferences) -> IngestionConfig:
    config = IngestionConfig.from_env(args.player_log or prefs.player_log_path or None)
    if args.follow is not None:
        config = config.with_follow(args.follow)
    if args.poll_interval is not None:
        config = config.with_poll_interval(args.poll_interval)
    if args.no_rotation_watch:
        config = config.with_rotation_watch(False)
    return config


def print_match_summary(details: MatchDetails):
    outcome = "won" if details.did_controller_win else "lost"
    print(f"\n=== Match {details.id} ===")
    print(f"{details.controller_player_name} vs {details.opponent_player_name}: {outcome}")
    if details.format:
        print(f"Format: {details.format}")
    for game in details.game_results:
        print(f"  Game {game.game_number}: {game.winning_player}")
    for mulligan in details.mulligans:
        print(f"  Game {mulligan.game_number} ({mulligan.play_draw}): {mulligan.decision} {mulligan.number_to_keep}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    prefs = RunnerPreferences.load()
    configure_logging("DEBUG" if args.debug else prefs.log_level)
    logger.info(f"arenalog {get_version()}")

    try:
        config = build_config(args, prefs)
    except ValueError as e:
        logger.error(str(e))
        return 2

    cards_db_path = args.cards_db or prefs.cards_db_path
    cards = ArenaCardDatabase(cards_db_path) if cards_db_path else StaticCardLookup()

    bus = EventBus()

    def on_match_completed(event: IngestionEvent):
        print_match_summary(MatchDetails.from_replay(event.data, cards))

    def on_draft_completed(event: IngestionEvent):
        draft = event.data
        print(f"\n=== Draft {draft.draft_id} ({draft.format} {draft.set_code}): {len(draft.picks)} picks ===")

    bus.subscribe(EventType.MATCH_COMPLETED, on_match_completed)
    bus.subscribe(EventType.DRAFT_COMPLETED, on_draft_completed)
    bus.subscribe(EventType.LOG_ROTATED, lambda e: logger.info("Player.log was rotated; starting over"))

    try:
        service = (
            LogIngestionService(config)
            .add_writer(DirectoryStorage(args.output_dir or prefs.output_dir, cards if cards_db_path else None))
            .add_draft_writer(DraftDirectoryStorage(args.draft_output_dir or prefs.draft_output_dir))
            .with_event_callback(bus)
            .with_shutdown()
        )
    except FileNotFoundError:
        logger.error(f"Player.log not found at {config.player_log_path}")
        return 1

    try:
        asyncio.run(service.start())
    except RotationWatchError as e:
        logger.error(f"Cannot watch log for rotation: {e}")
        return 1

    stats = service.stats
    print(f"\nMatches: {stats.matches_completed} written, {stats.matches_dropped} dropped. "
          f"Drafts: {stats.drafts_completed}. Parse errors: {stats.parse_errors}.")
    return 0
