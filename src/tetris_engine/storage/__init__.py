"""Persistence collaborators for game sessions."""

from .service import TetrisService
from .stores import JsonFileStore, MemoryStore, SessionStore

__all__ = ["TetrisService", "JsonFileStore", "MemoryStore", "SessionStore"]
