"""
Storage module.

Handles persistence of ideas and interactions via SQLite, Airtable, or memory.
"""

from ideaswipe.storage.base import IdeaStore, InteractionStore, Storage
from ideaswipe.storage.memory import MemoryStorage
from ideaswipe.storage.sqlite import SQLiteStorage
from ideaswipe.storage.airtable import AirtableStorage
from ideaswipe.storage.factory import get_storage

__all__ = [
    "IdeaStore",
    "InteractionStore",
    "Storage",
    "MemoryStorage",
    "SQLiteStorage",
    "AirtableStorage",
    "get_storage",
]
