from __future__ import annotations

import logging
import random
import uuid

logger = logging.getLogger(__name__)

_fallback_rng = random.Random()


def generate_note_id() -> str:
    """
    Return a new note id as a canonical UUID string.

    Normally a version-4 UUID from the OS CSPRNG. When no strong random
    source exists (os.urandom raising NotImplementedError) the id is built
    from the `random` module's Mersenne Twister instead. Those ids are
    predictable and collide far more easily; they keep note creation
    available but should not be relied on across many clients.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("no strong random source available, using pseudo-random note ids")
        return str(uuid.UUID(int=_fallback_rng.getrandbits(128), version=4))
