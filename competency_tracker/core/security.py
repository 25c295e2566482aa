"""Password hashing, temporary passwords and session cookie signing."""
import base64
import hmac
import hashlib
import secrets
import string
import time

from passlib.context import CryptContext

from competency_tracker.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def generate_temporary_password(length: int | None = None) -> str:
    """Random lowercase/digit password handed to a user once by an admin."""
    length = length or get_settings().temp_password_length
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


# Session cookie value: "<urlsafe-b64 of user_id:issued_at>.<hex hmac-sha256>"
def _sign(data: bytes) -> str:
    key = get_settings().secret_key.encode("utf-8")
    return hmac.new(key, data, hashlib.sha256).hexdigest()


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def create_session_token(user_id: int, issued_at: int | None = None) -> str:
    issued_at = int(time.time()) if issued_at is None else issued_at
    data = f"{user_id}:{issued_at}".encode("utf-8")
    return f"{_b64(data)}.{_sign(data)}"


def verify_session_token(token: str | None) -> int | None:
    """User id from a valid, unexpired token; None for anything else."""
    encoded, _, signature = (token or "").rpartition(".")
    if not encoded:
        return None
    try:
        data = _unb64(encoded)
        user_part, issued_part = data.decode("utf-8").split(":")
        user_id, issued_at = int(user_part), int(issued_part)
    except ValueError:
        return None
    if not hmac.compare_digest(_sign(data).encode("ascii"), signature.encode("utf-8")):
        return None
    if time.time() - issued_at > get_settings().auth_cookie_max_age:
        return None
    return user_id
