from .completion import CompletionCoordinator
from .engine import TournamentEngine
from .errors import (
    AlreadyCompleted,
    CompletionFailed,
    EmptySession,
    InvalidReference,
    NotFound,
    TournamentError,
)
from .session_store import SessionStore

__all__ = [
    "AlreadyCompleted",
    "CompletionCoordinator",
    "CompletionFailed",
    "EmptySession",
    "InvalidReference",
    "NotFound",
    "SessionStore",
    "TournamentEngine",
    "TournamentError",
]
