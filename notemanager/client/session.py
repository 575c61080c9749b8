from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from notemanager.client.credentials import CredentialStore
from notemanager.client.remote import RemoteAuthApi

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    token: str
    user_handle: str


SessionListener = Callable[[SessionState], None]


class SessionManager:
    """
    Owns the one authenticated identity of the process.

    Anonymous -> Authenticated through login(), signup() or restore();
    Authenticated -> Anonymous through logout() or invalidate(). Expiry is
    only discovered when a remote call is rejected.

    `epoch` changes on every transition. Background work records it when it
    starts and compares on completion, so results belonging to an earlier
    session are dropped.
    """

    def __init__(self, auth_api: RemoteAuthApi, credentials: CredentialStore):
        self._auth_api = auth_api
        self._credentials = credentials
        self._session: Optional[Session] = None
        self._listeners: list[SessionListener] = []
        self.epoch = 0

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self._session is not None else SessionState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def _activate(self, session: Session) -> None:
        if self._session is not None:
            self._teardown()
        self._session = session
        self.epoch += 1
        self._notify()

    def _teardown(self) -> None:
        self._credentials.clear()
        self._session = None
        self.epoch += 1
        self._notify()

    def restore(self) -> Optional[Session]:
        """Adopt a persisted credential without checking it against the server."""
        if self._session is not None:
            return self._session
        stored = self._credentials.load()
        if stored is None:
            return None
        token, user_handle = stored
        session = Session(token=token, user_handle=user_handle)
        self._activate(session)
        logger.info("restored session for %s", user_handle)
        return session

    async def login(self, email: str, password: str) -> Session:
        # AuthError propagates and leaves the current state untouched
        payload = await self._auth_api.login(email, password)
        session = Session(token=payload["token"], user_handle=payload["email"])
        self._activate(session)
        self._credentials.save(session.token, session.user_handle)
        logger.info("logged in as %s", session.user_handle)
        return session

    async def signup(self, email: str, password: str) -> Session:
        await self._auth_api.signup(email, password)
        return await self.login(email, password)

    def logout(self) -> None:
        if self._session is None:
            self._credentials.clear()
            return
        logger.info("logging out %s", self._session.user_handle)
        self._teardown()

    def invalidate(self) -> None:
        """Forced logout after the remote store rejected the credential."""
        if self._session is not None:
            logger.warning("credential for %s rejected, ending session", self._session.user_handle)
        self.logout()
