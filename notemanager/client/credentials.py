from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from notemanager.utils.files import atomic_write_json

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "userEmail"


class CredentialStore:
    """Durable client-side copy of the bearer token and user handle (state_dir/session.json)."""

    def __init__(self, state_dir: Path):
        self.path = state_dir / "session.json"

    def load(self) -> Optional[tuple[str, str]]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("unreadable session file %s, ignoring it", self.path)
            return None
        if not isinstance(raw, dict):
            return None
        token, user = raw.get(TOKEN_KEY), raw.get(USER_KEY)
        if not token or not user:
            return None
        return str(token), str(user)

    def save(self, token: str, user_handle: str) -> None:
        atomic_write_json(self.path, {TOKEN_KEY: token, USER_KEY: user_handle})

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
