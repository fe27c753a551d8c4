import logging
import secrets

from passlib.context import CryptContext

_logger = logging.getLogger(__name__)

# bcrypt for new hashes; hex_sha256 accepted for configs carrying plain
# SHA-256 hex digests
pwd_context = CryptContext(schemes=["bcrypt", "hex_sha256"], deprecated="auto")


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:  # includes passlib UnknownHashError
        _logger.warning("Unrecognized password hash in auth configuration")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def compare_plain(given: str, expected: str) -> bool:
    """Constant-time comparison of two plain-text secrets."""
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))
