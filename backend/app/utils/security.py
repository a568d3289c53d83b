import bcrypt

from .validation import PASSWORD_MAX_BYTES

# Compared against when the email is unknown, so a failed login costs one bcrypt
# check either way.
_DUMMY_HASH = bcrypt.hashpw(b"job-board-dummy-password", bcrypt.gensalt()).decode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt directly.

    bcrypt truncates at 72 *bytes* and recent builds raise if you exceed it,
    so enforce the limit explicitly.
    """
    if not password:
        raise ValueError("Password is required")

    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be {PASSWORD_MAX_BYTES} bytes or less")

    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    """
    Check ``password`` against ``hashed``.

    ``hashed=None`` (no such user) still runs a full bcrypt comparison and returns False.
    """
    if hashed is None:
        _checkpw(password or "", _DUMMY_HASH)
        return False
    if not password:
        return False
    return _checkpw(password, hashed)


def _checkpw(password: str, hashed: str) -> bool:
    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > PASSWORD_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False
