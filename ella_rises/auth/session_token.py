from datetime import datetime, timedelta, timezone

import jwt

ALGORITHM = "HS256"


def create_session_token(sid: str, secret: str, expires_hours: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sid": sid, "exp": now + timedelta(hours=expires_hours), "iat": now}
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_session_token(token: str, secret: str) -> str | None:
    """Return the session id carried by a cookie, or None if it does not verify."""
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
