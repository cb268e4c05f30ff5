# services/passwords.py
import hmac

from bcrypt import checkpw, gensalt, hashpw

from config import BCRYPT_ROUNDS

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _secret_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases refuse longer input
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return hashpw(_secret_bytes(password), gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def is_hashed(stored: str) -> bool:
    return isinstance(stored, str) and stored.startswith(BCRYPT_PREFIXES)


def verify_password(password: str, stored: str) -> bool:
    """Constant-time check of ``password`` against a stored secret.

    Records written before hashing was introduced hold the plain secret; those
    are still accepted so the caller can upgrade them.
    """
    if not stored:
        return False
    if is_hashed(stored):
        return checkpw(_secret_bytes(password), stored.encode("utf-8"))
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
