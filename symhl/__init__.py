"""Symbol highlighting, color hashing and occurrence navigation for text editors."""

__version__ = "0.1.0"
