"""
Data source and write collaborator contracts, plus an in-memory implementation.
"""

from .base import UserDataSource, UserWriter
from .in_memory import ILLEGAL_USER_MESSAGE, InMemoryUserStore, gravatar_url

__all__ = [
    "UserDataSource",
    "UserWriter",
    "InMemoryUserStore",
    "ILLEGAL_USER_MESSAGE",
    "gravatar_url",
]
