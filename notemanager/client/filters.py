from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from notemanager.models.notes import Note, NoteStatus

if TYPE_CHECKING:
    from notemanager.client.note_store import NoteStore


class FilterTag(str, Enum):
    GENERAL = "general"
    TASKS = "tasks"
    PENDING = "pending"
    DONE = "done"


def classify(note: Note) -> FilterTag:
    """Every note falls in exactly one category; only active notes split on the due date."""
    if note.status == NoteStatus.DONE:
        return FilterTag.DONE
    if note.status == NoteStatus.PENDING:
        return FilterTag.PENDING
    return FilterTag.TASKS if note.is_task else FilterTag.GENERAL


class FilterEngine:
    """
    Multi-select view over a NoteStore.

    No tag selected means "show all"; otherwise a note is shown when its
    category is selected. Counts always cover the whole collection.
    """

    def __init__(self, store: NoteStore):
        self._store = store
        self._active: set[FilterTag] = set()

    @property
    def active(self) -> frozenset[FilterTag]:
        return frozenset(self._active)

    @property
    def shows_all(self) -> bool:
        return not self._active

    def toggle(self, tag: FilterTag) -> None:
        tag = FilterTag(tag)
        if tag in self._active:
            self._active.remove(tag)
        else:
            self._active.add(tag)

    def clear(self) -> None:
        self._active.clear()

    def visible_notes(self) -> list[Note]:
        notes = self._store.notes
        if not self._active:
            return notes
        return [n for n in notes if classify(n) in self._active]

    def counts(self) -> dict[FilterTag, int]:
        out = {tag: 0 for tag in FilterTag}
        for note in self._store.notes:
            out[classify(note)] += 1
        return out
