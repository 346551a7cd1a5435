#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch --source local

Or render from a running colour server:

    python -m tile_mosaic.cli single my_photo.jpg --url http://localhost:8765
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()
