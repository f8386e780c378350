"""
Join-code allocation for practice sessions.

Codes are 6 characters from A-Z0-9, stored uppercase, and unique among
active sessions only; codes of ended sessions may be handed out again.
"""
import logging
import re
import secrets
import string
from typing import Iterable

from studycore.core.exceptions import CodeSpaceExhausted

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_SPACE = len(CODE_ALPHABET) ** CODE_LENGTH  # 36^6 = 2,176,782,336
DEFAULT_MAX_ATTEMPTS = 100

_CODE_PATTERN = re.compile(r"^[A-Z0-9]{6}$")


def normalize_code(raw: str) -> str:
    """Canonical form of a user-entered code (trimmed, uppercase)."""
    return (raw or "").strip().upper()


def is_valid_code(code: str) -> bool:
    return bool(_CODE_PATTERN.match(code or ""))


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def allocate(existing_active_codes: Iterable[str], max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> str:
    """
    Allocate a code that is not among the given active codes.

    Args:
        existing_active_codes: Codes of currently active sessions (any case)
        max_attempts: Consecutive collisions tolerated before giving up

    Returns:
        A new uppercase code

    Raises:
        CodeSpaceExhausted: If the active set fills the keyspace or no free
            code was drawn within max_attempts tries
    """
    taken = {normalize_code(code) for code in existing_active_codes}
    if len(taken) >= CODE_SPACE:
        raise CodeSpaceExhausted("Every session code is in use")

    for attempt in range(1, max_attempts + 1):
        candidate = generate_code()
        if candidate not in taken:
            if attempt > 1:
                logger.debug(f"Allocated session code after {attempt} attempts")
            return candidate

    logger.error(f"No free session code after {max_attempts} attempts ({len(taken)} active)")
    raise CodeSpaceExhausted(f"Could not allocate a session code after {max_attempts} attempts")
