from fastapi import Path

from userbase.core.errors import InvalidArgument

# Largest value a 64-bit signed INTEGER column can hold
MAX_USER_ID = 2**63 - 1


def valid_user_id(user_id: str = Path(...)) -> int:
    """
    Parse the user_id path segment.

    Taken as a string so that "abc", "0", "-3" and ids beyond the INTEGER
    column range produce the same 400 Bad Request instead of a generic
    validation error or a driver overflow.
    """
    try:
        parsed = int(user_id)
    except ValueError:
        parsed = 0
    if parsed <= 0 or parsed > MAX_USER_ID:
        raise InvalidArgument("User ID must be a positive integer")
    return parsed
