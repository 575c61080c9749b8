"""Error taxonomy of the client engine."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class NoteManagerError(Exception):
    pass


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_EMAIL = "duplicate_email"
    NETWORK = "network"
    SERVER_FAULT = "server_fault"


class AuthError(NoteManagerError):
    """Login or signup was refused, or never reached the server."""

    def __init__(self, kind: AuthErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value


class SessionErrorKind(str, Enum):
    EXPIRED = "expired"
    FORBIDDEN = "forbidden"


class SessionError(NoteManagerError):
    """The remote store rejected the credential; the session has to end."""

    def __init__(self, kind: SessionErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value


class TransportError(NoteManagerError):
    """Network failure or a non-auth HTTP error. status_code is None when no response arrived."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(NoteManagerError):
    pass
