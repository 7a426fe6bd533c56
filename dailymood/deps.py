from .db import SessionLocal
from .auth.oidc import verify_id_token
from .store import EntryStore
from .utils import Clock
from fastapi import Depends, Header, HTTPException
import os
from typing import Generator

_clock = Clock()


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_clock() -> Clock:
    return _clock


def get_store(db=Depends(get_db), clock: Clock = Depends(get_clock)) -> EntryStore:
    return EntryStore(db, clock)


def get_user_id(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> str:
    """
    Resolve the current user:
    - a verified bearer id token -> its `sub`
    - else the x-user-id header, else MOCK_USER_ID (local development)
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(status_code=401, detail="Bearer token required")
        return verify_id_token(token.strip())["sub"]

    raw = x_user_id or os.getenv("MOCK_USER_ID")
    if not raw or not raw.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return raw.strip()
