"""Random invitation codes.

Codes are 5 characters drawn uniformly from ``[A-Z0-9]``. There is no checksum;
uniqueness is established by asking the store, and made durable by claiming
the code (see ``IndividualWriteModel.claim_invitation_code``).
"""

import logging
import random
import secrets
import string
from collections.abc import Awaitable, Callable

from src.config.settings import settings
from src.guests.dtos import InvitationCodeExhaustedError

logger = logging.getLogger(__name__)

INVITATION_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITATION_CODE_LENGTH = 5

_system_random = secrets.SystemRandom()


def generate_invitation_code(rng: random.Random | None = None) -> str:
    rng = rng or _system_random
    return "".join(rng.choice(INVITATION_CODE_ALPHABET) for _ in range(INVITATION_CODE_LENGTH))


async def generate_unique_code(
    exists_check: Callable[[str], Awaitable[bool]],
    max_attempts: int | None = None,
    rng: random.Random | None = None,
) -> str:
    """Generate codes until ``exists_check`` reports one as free.

    Raises InvitationCodeExhaustedError once ``max_attempts`` candidates
    have all been taken.
    """
    if max_attempts is None:
        max_attempts = settings.INVITATION_CODE_MAX_ATTEMPTS
    for attempt in range(1, max_attempts + 1):
        candidate = generate_invitation_code(rng)
        if not await exists_check(candidate):
            return candidate
        logger.debug(f"Invitation code {candidate} already in use (attempt {attempt})")

    logger.error(f"Gave up generating an invitation code after {max_attempts} attempts")
    raise InvitationCodeExhaustedError(max_attempts)
