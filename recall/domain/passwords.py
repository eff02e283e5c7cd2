import hashlib

import bcrypt


def _bcrypt_input(password: str) -> bytes:
    """
    bcrypt only accepts up to 72 bytes.
    If longer, pre-hash to 32 bytes (SHA-256) first.
    """
    raw = password.encode("utf-8")
    if len(raw) <= 72:
        return raw
    return hashlib.sha256(raw).digest()


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_bcrypt_input(password), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
