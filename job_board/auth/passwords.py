"""Password hashing helpers — bcrypt with a floor on the cost factor."""

import bcrypt

from job_board.config import MIN_BCRYPT_ROUNDS


def hash_password(password: str, rounds: int = MIN_BCRYPT_ROUNDS) -> str:
    """Hash a plaintext password using bcrypt (cost never below MIN_BCRYPT_ROUNDS)."""
    salt = bcrypt.gensalt(rounds=max(rounds, MIN_BCRYPT_ROUNDS))
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
