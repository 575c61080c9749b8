from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import httpx

from notemanager.client.calendar import CalendarExporter
from notemanager.client.credentials import CredentialStore
from notemanager.client.filters import FilterEngine
from notemanager.client.note_store import NoteStore
from notemanager.client.remote import RemoteAuthApi, RemoteNoteApi, create_http_client
from notemanager.client.session import Session, SessionManager
from notemanager.config import api_base_url, state_dir

logger = logging.getLogger(__name__)


class ClientContext:
    """
    Builds and wires the client components once per process.

        async with ClientContext() as ctx:
            await ctx.start()
            ctx.notes.add("Buy milk")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        state_path: Optional[Path] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        opener: Optional[Callable[[str], object]] = None,
    ):
        self.http = create_http_client(base_url or api_base_url(), transport=transport)
        self.session = SessionManager(RemoteAuthApi(self.http), CredentialStore(state_path or state_dir()))
        self.notes = NoteStore(self.session, RemoteNoteApi(self.http), CalendarExporter(opener))
        self.filters = FilterEngine(self.notes)

    async def start(self) -> Optional[Session]:
        """Restore a persisted session, if any, and load its notes."""
        session = self.session.restore()
        if session is not None:
            await self.notes.load()
        return self.session.current

    async def login(self, email: str, password: str) -> Session:
        session = await self.session.login(email, password)
        await self.notes.load()
        return session

    async def signup(self, email: str, password: str) -> Session:
        session = await self.session.signup(email, password)
        await self.notes.load()
        return session

    def logout(self) -> None:
        self.session.logout()

    async def aclose(self) -> None:
        await self.notes.drain()
        await self.http.aclose()

    async def __aenter__(self) -> "ClientContext":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
