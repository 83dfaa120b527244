"""arenalog: match replays and drafts reconstructed from MTG Arena's Player.log."""
