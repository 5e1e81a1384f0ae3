#!/usr/bin/env python3
"""
SQUARE_INVADERS Launcher
=========================
Run this script to start the game.
"""

from square_invaders.main import main

if __name__ == "__main__":
    main()
