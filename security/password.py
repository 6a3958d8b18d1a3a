import bcrypt
from flask import current_app


def _configured_rounds() -> int:
    return current_app.config.get("BCRYPT_ROUNDS", 12)


def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or not plain_password:
        raise ValueError("Admin password must be a non-empty string")
    salt = bcrypt.gensalt(rounds=_configured_rounds())
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def check_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # not a bcrypt hash
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the stored hash was made with a cost other than BCRYPT_ROUNDS."""
    # $2b$<cost>$<salt+digest>
    parts = (password_hash or "").split("$")
    if len(parts) != 4 or not parts[2].isdigit():
        return True
    return int(parts[2]) != _configured_rounds()
