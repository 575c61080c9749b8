from __future__ import annotations

import os
import warnings
from typing import Optional

from passlib.context import CryptContext


def _build_context(rounds: Optional[int]) -> CryptContext:
    """bcrypt when its backend loads, pbkdf2_sha256 otherwise (with a RuntimeWarning)."""
    try:
        ctx = CryptContext(schemes=["bcrypt"], **({"bcrypt__rounds": rounds} if rounds else {}))
        ctx.hash("backend-check")
        return ctx
    except Exception as exc:
        warnings.warn(f"bcrypt unavailable, using pbkdf2_sha256 for account passwords: {exc}", RuntimeWarning)
    return CryptContext(schemes=["pbkdf2_sha256"], **({"pbkdf2_sha256__rounds": rounds} if rounds else {}))


def _rounds() -> Optional[int]:
    raw = os.environ.get("BCRYPT_ROUNDS", "")
    return int(raw) if raw.isdigit() else None


pwd_context = _build_context(_rounds())


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: Optional[str], hashed: Optional[str]) -> bool:
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # unknown hash format or over-long bcrypt secret
        return False
