import bcrypt

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72

# Checked against when the email is unknown so both login failures cost one bcrypt round.
_DUMMY_HASH = bcrypt.hashpw(b"zingmedia-dummy-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    stored = password_hash.encode("utf-8") if password_hash else _DUMMY_HASH
    try:
        matched = bcrypt.checkpw(password.encode("utf-8"), stored)
    except ValueError:
        return False
    return matched and password_hash is not None
