"""
RSS Digest Backend

A FastAPI backend that reads a set of RSS/Atom feeds, ranks their items
against the user's interests and recommends more sources to follow.
"""

__version__ = "1.0.0"
