"""Reverse Tetris: remove polyomino footprints from a pre-filled board."""

__version__ = "0.1.0"
