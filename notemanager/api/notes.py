from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from notemanager.config import data_dir
from notemanager.models.notes import Note, NoteUpdate
from notemanager.storage.notes_store import NoteExistsError, NotesStore
from notemanager.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/api/notes", tags=["notes"])

DATA_DIR = data_dir()
store = NotesStore(DATA_DIR)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found or access denied")


@router.get("", response_model=list[Note])
def list_notes(user_email: str = Depends(get_current_user)) -> list[Note]:
    return store.list_notes(user_email)


@router.post("", response_model=Note, status_code=status.HTTP_201_CREATED)
def create_note(payload: Note, user_email: str = Depends(get_current_user)) -> Note:
    try:
        return store.create_note(user_email, payload)
    except NoteExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Note id already exists")
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid note id")


@router.put("/{note_id}", response_model=Note)
def update_note(note_id: str, payload: NoteUpdate, user_email: str = Depends(get_current_user)) -> Note:
    try:
        updated = store.update_note(user_email, note_id, payload.changes())
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Update would leave the note invalid")
    except ValueError:
        raise _not_found()
    if updated is None:
        raise _not_found()
    return updated


@router.delete("/{note_id}")
def delete_note(note_id: str, user_email: str = Depends(get_current_user)) -> dict:
    try:
        deleted = store.delete_note(user_email, note_id)
    except ValueError:
        raise _not_found()
    if not deleted:
        raise _not_found()
    return {"message": "Note deleted successfully"}
