from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError as ModelValidationError

from notemanager.client.calendar import CalendarExporter
from notemanager.client.errors import SessionError, TransportError, ValidationError
from notemanager.client.ids import generate_note_id
from notemanager.client.remote import RemoteNoteApi
from notemanager.client.session import SessionManager, SessionState
from notemanager.models.notes import Note, NoteColor, NoteStatus

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def build_note(content: str, color: NoteColor, end_date: Optional[str] = None) -> Note:
    """Create a fresh active note; raises ValidationError for blank content or a bad date."""
    text = (content or "").strip()
    if not text:
        raise ValidationError("note content is empty")
    try:
        return Note(
            id=generate_note_id(),
            content=text,
            created_at=_now_ms(),
            color=NoteColor(color),
            end_date=end_date or None,
            status=NoteStatus.ACTIVE,
        )
    except (ModelValidationError, ValueError) as exc:
        raise ValidationError(str(exc)) from exc


class NoteStore:
    """
    In-memory, newest-first note collection of the current session.

    Every mutation changes the local list first and then starts the matching
    remote call as a background task. Mutations must run inside the event
    loop; without one they raise RuntimeError before touching the list.
    Remote failures are logged and never undone locally; an authorization
    failure ends the session. The list is emptied whenever the session
    changes.
    """

    def __init__(
        self,
        session: SessionManager,
        api: RemoteNoteApi,
        exporter: Optional[CalendarExporter] = None,
    ):
        self._session = session
        self._api = api
        self._exporter = exporter
        self._notes: list[Note] = []
        self._tasks: set[asyncio.Task] = set()
        self.loading = False
        self.last_error: Optional[Exception] = None
        session.add_listener(self._on_session_change)

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def _on_session_change(self, state: SessionState) -> None:
        self._notes = []
        self.last_error = None
        self.loading = False

    def _is_current(self, epoch: int) -> bool:
        return self._session.epoch == epoch

    async def load(self) -> None:
        """Replace the collection with the server's copy. Never raises."""
        session = self._session.current
        if session is None:
            return
        epoch = self._session.epoch
        self.loading = True
        try:
            notes = await self._api.list_notes(session.token)
        except SessionError as exc:
            if self._is_current(epoch):
                logger.warning("loading notes was rejected (%s)", exc.kind.value)
                self._session.invalidate()
            return
        except TransportError as exc:
            if self._is_current(epoch):
                logger.error("could not load notes: %s", exc)
                self._notes = []
                self.last_error = exc
                self.loading = False
            return

        if not self._is_current(epoch):
            logger.debug("dropping note list of a previous session")
            return
        self._notes = notes
        self.last_error = None
        self.loading = False

    def add(self, content: str, color: NoteColor = NoteColor.WHITE, end_date: Optional[str] = None) -> Optional[Note]:
        session = self._session.current
        if session is None:
            return None
        try:
            note = build_note(content, color, end_date)
        except ValidationError as exc:
            logger.debug("note rejected: %s", exc)
            return None

        loop = asyncio.get_running_loop()
        self._notes.insert(0, note)
        self._dispatch(loop, "create note", lambda token: self._api.create_note(token, note))

        if note.end_date and self._exporter is not None:
            self._exporter.export(note)
        return note

    def remove(self, note_id: str) -> None:
        if self._session.current is None:
            return
        loop = asyncio.get_running_loop()
        self._notes = [n for n in self._notes if n.id != note_id]
        self._dispatch(loop, "delete note", lambda token: self._api.delete_note(token, note_id))

    def set_status(self, note_id: str, status: NoteStatus) -> None:
        if self._session.current is None:
            return
        status = NoteStatus(status)
        loop = asyncio.get_running_loop()
        self._notes = [n.model_copy(update={"status": status}) if n.id == note_id else n for n in self._notes]
        self._dispatch(loop, "update status", lambda token: self._api.update_status(token, note_id, status))

    def _dispatch(
        self, loop: asyncio.AbstractEventLoop, action: str, call: Callable[[str], Awaitable[None]]
    ) -> None:
        session = self._session.current
        if session is None:
            return
        epoch = self._session.epoch
        task = loop.create_task(self._run_remote(action, epoch, call(session.token)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_remote(self, action: str, epoch: int, pending: Awaitable[None]) -> None:
        try:
            await pending
        except SessionError as exc:
            if not self._is_current(epoch):
                logger.debug("%s: ignoring auth failure of a previous session", action)
                return
            logger.warning("%s was rejected (%s)", action, exc.kind.value)
            self._session.invalidate()
        except TransportError as exc:
            if not self._is_current(epoch):
                logger.debug("%s: ignoring failure of a previous session", action)
                return
            logger.error("%s failed: %s", action, exc)

    async def drain(self) -> None:
        """Wait for every in-flight remote call to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
