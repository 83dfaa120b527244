#!/usr/bin/env python3
"""
arenalog - Main Entry Point

Usage:
    python main.py                    # follow the auto-detected Player.log
    python main.py --log Player.log --no-follow
"""

import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from arenalog.app import main

if __name__ == "__main__":
    sys.exit(main())
