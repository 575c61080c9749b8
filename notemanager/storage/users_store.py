from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from notemanager.storage.notes_store import _safe_segment
from notemanager.utils.files import atomic_write_json


@dataclass(frozen=True)
class UserRecord:
    email: str
    hashed_password: str
    created_at: str


class UsersStore:
    """Account records, stored next to the owner's notes as users/<email>/user.json."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _user_path(self, email: str) -> Path:
        return self.base_dir / "users" / _safe_segment(email, "email") / "user.json"

    def exists(self, email: str) -> bool:
        return self._user_path(email).exists()

    def get(self, email: str) -> Optional[UserRecord]:
        p = self._user_path(email)
        if not p.exists():
            return None
        raw = json.loads(p.read_text(encoding="utf-8"))
        return UserRecord(**raw)

    def create(self, email: str, hashed_password: str) -> UserRecord:
        p = self._user_path(email)
        if p.exists():
            raise FileExistsError(email)

        rec = UserRecord(
            email=email,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        atomic_write_json(p, asdict(rec))
        return rec
