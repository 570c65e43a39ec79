"""Helpers shared across test modules"""

from datetime import datetime, timezone


def local_time(*args) -> datetime:
    """Interpret a wall-clock time in server-local time and return it in UTC"""
    return datetime(*args).astimezone().astimezone(timezone.utc)
