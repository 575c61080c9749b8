from notemanager.client.context import ClientContext
from notemanager.client.errors import AuthError, AuthErrorKind, SessionError, TransportError, ValidationError
from notemanager.client.filters import FilterEngine, FilterTag, classify
from notemanager.client.note_store import NoteStore
from notemanager.client.session import Session, SessionManager, SessionState

__all__ = [
    "AuthError",
    "AuthErrorKind",
    "ClientContext",
    "FilterEngine",
    "FilterTag",
    "NoteStore",
    "Session",
    "SessionError",
    "SessionManager",
    "SessionState",
    "TransportError",
    "ValidationError",
    "classify",
]
