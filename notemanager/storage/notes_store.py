import json
from pathlib import Path
from typing import Any, Optional

from notemanager.models.notes import Note
from notemanager.utils.files import atomic_write_json


def _safe_segment(value: str, what: str) -> str:
    # keep ids and emails usable as single path components
    if not value or any(ch in value for ch in ["/", "\\"]) or ".." in value:
        raise ValueError(f"Invalid {what}")
    return value


def _notes_dir(base_dir: Path, user_email: str) -> Path:
    return base_dir / "users" / _safe_segment(user_email, "user") / "notes"


def _note_path(base_dir: Path, user_email: str, note_id: str) -> Path:
    return _notes_dir(base_dir, user_email) / f"{_safe_segment(note_id, 'note id')}.json"


class NoteExistsError(Exception):
    pass


class NotesStore:
    """File-backed note storage, one JSON document per note, scoped by owner email."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def create_note(self, user_email: str, note: Note) -> Note:
        path = _note_path(self.base_dir, user_email, note.id)
        if path.exists():
            raise NoteExistsError(note.id)
        atomic_write_json(path, {**note.to_dict(), "userEmail": user_email})
        return note

    def list_notes(self, user_email: str) -> list[Note]:
        notes_dir = _notes_dir(self.base_dir, user_email)
        if not notes_dir.exists():
            return []
        out: list[Note] = []
        for p in notes_dir.glob("*.json"):
            try:
                out.append(Note.model_validate_json(p.read_text(encoding="utf-8")))
            except ValueError:
                # skip corrupted documents rather than failing the whole listing
                continue
        out.sort(key=lambda n: n.created_at, reverse=True)
        return out

    def get_note(self, user_email: str, note_id: str) -> Optional[Note]:
        path = _note_path(self.base_dir, user_email, note_id)
        if not path.exists():
            return None
        return Note.model_validate_json(path.read_text(encoding="utf-8"))

    def update_note(self, user_email: str, note_id: str, changes: dict[str, Any]) -> Optional[Note]:
        path = _note_path(self.base_dir, user_email, note_id)
        if not path.exists():
            return None

        raw = json.loads(path.read_text(encoding="utf-8"))
        for key, value in changes.items():
            if value is None:
                raw.pop(key, None)
            else:
                raw[key] = value

        updated = Note.model_validate(raw)
        atomic_write_json(path, raw)
        return updated

    def delete_note(self, user_email: str, note_id: str) -> bool:
        path = _note_path(self.base_dir, user_email, note_id)
        if not path.exists():
            return False
        path.unlink()
        return True
