from __future__ import annotations

import logging
import webbrowser
from datetime import date, timedelta
from typing import Callable, Optional
from urllib.parse import quote

from notemanager.models.notes import Note

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
TITLE_LENGTH = 60

# same unreserved set as JavaScript's encodeURIComponent
_UNRESERVED = "-_.!~*'()"


def _encode(text: str) -> str:
    return quote(text, safe=_UNRESERVED)


def _title(text: str) -> str:
    # the web client cut the title at 60 UTF-16 code units; a surrogate pair
    # split by that cut is dropped instead of emitting half of it
    head = text.encode("utf-16-le")[: TITLE_LENGTH * 2]
    return head.decode("utf-16-le", errors="ignore")


class CalendarExporter:
    """Turns a dated note into an all-day Google Calendar event link and opens it."""

    def __init__(self, opener: Optional[Callable[[str], object]] = None):
        self._opener = opener or webbrowser.open

    def build_url(self, note: Note) -> Optional[str]:
        if not note.end_date:
            return None
        day = date.fromisoformat(note.end_date)
        dates = f"{day:%Y%m%d}/{day + timedelta(days=1):%Y%m%d}"
        title = _encode(_title(note.content))
        details = _encode(note.content)
        return f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE&text={title}&details={details}&dates={dates}"

    def export(self, note: Note) -> None:
        url = self.build_url(note)
        if url is None:
            return
        try:
            self._opener(url)
        except (webbrowser.Error, OSError) as exc:
            logger.warning("could not open calendar link for note %s: %s", note.id, exc)
