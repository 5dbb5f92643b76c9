"""Public access tokens for bills."""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


@dataclass(frozen=True)
class TokenAllocation:
    """Outcome of the collision-checked token loop."""

    token: Optional[str]
    attempts: int

    @property
    def ok(self) -> bool:
        return self.token is not None


def generate_token() -> str:
    """Return a 128-bit random token as a UUID4 string.

    uuid4 draws from the OS CSPRNG. Only if the OS has no randomness source
    do we fall back to the non-cryptographic ``random`` module.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("No OS randomness source available, using non-cryptographic token fallback")
        return f"{random.getrandbits(128):032x}"


def allocate_public_token(
    token_exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generator: Callable[[], str] = generate_token,
) -> TokenAllocation:
    """
    Generate tokens until one is not already used by a stored bill.

    Args:
        token_exists: Store lookup telling whether a token is taken
        max_attempts: Upper bound on generated candidates
        generator: Token source

    Returns:
        TokenAllocation with the token, or with ``token=None`` when every
        candidate collided
    """
    for attempt in range(1, max_attempts + 1):
        candidate = generator()
        if not token_exists(candidate):
            return TokenAllocation(token=candidate, attempts=attempt)
        logger.warning(f"Public token collision on attempt {attempt}/{max_attempts}")
    return TokenAllocation(token=None, attempts=max_attempts)
