"""Centralized validation constants for the employee API.

This module provides a single source of truth for the limits used by the
request DTOs and the policy rules in the service layer.
"""

from typing import Final

# =============================================================================
# Employee Constants
# =============================================================================

MIN_PHONE_COUNT: Final[int] = 2
MAX_PHONE_NUMBER: Final[int] = 2**63 - 1

ADULT_AGE: Final[int] = 18

MAX_DOCUMENT_NUMBER: Final[int] = 2**31 - 1
MAX_NAME_LENGTH: Final[int] = 100
MAX_EMAIL_LENGTH: Final[int] = 200

# =============================================================================
# Password Constants
# =============================================================================

MIN_PASSWORD_LENGTH: Final[int] = 6
# bcrypt only accepts 72 bytes of input, so multi-byte characters count extra
MAX_PASSWORD_LENGTH: Final[int] = 72
MAX_PASSWORD_BYTES: Final[int] = 72
