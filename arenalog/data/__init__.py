from .arena_cards import ArenaCardDatabase, StaticCardLookup
from .directory_storage import DirectoryStorage, DraftDirectoryStorage

__all__ = ['ArenaCardDatabase', 'StaticCardLookup', 'DirectoryStorage', 'DraftDirectoryStorage']
