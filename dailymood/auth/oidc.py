import time, json, base64, requests
from functools import lru_cache
from typing import Any, Dict
from fastapi import HTTPException
from jose import jwk
from jose.exceptions import JWKError
from jose.utils import base64url_decode
import os


def issuer() -> str:
    return os.getenv("IDENTITY_ISSUER", "").rstrip("/")


def jwks_url() -> str:
    return os.getenv("IDENTITY_JWKS_URL") or f"{issuer()}/.well-known/jwks.json"


@lru_cache(maxsize=4)
def _fetch_jwks(url: str):
    resp = requests.get(url, timeout=5)
    resp.raise_for_status()
    return resp.json()["keys"]


def _b64_json(segment: str) -> Dict[str, Any]:
    data = json.loads(base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))
    if not isinstance(data, dict):
        raise ValueError("token segment is not a JSON object")
    return data


def verify_id_token(id_token: str) -> Dict[str, Any]:
    """Check signature, expiry, issuer and (if configured) audience; return the claims."""
    if not issuer():
        raise HTTPException(status_code=401, detail="Identity provider not configured")

    try:
        header_b64, payload_b64, sig_b64 = id_token.split(".")
        header = _b64_json(header_b64)
    except ValueError:
        raise HTTPException(status_code=401, detail="Malformed token")

    kid = header.get("kid")
    try:
        keys = _fetch_jwks(jwks_url())
    except requests.RequestException:
        raise HTTPException(status_code=503, detail="Identity provider unavailable")
    key = next((k for k in keys if k.get("kid") == kid), None)
    if not key:
        raise HTTPException(status_code=401, detail="Unknown key")

    message = f"{header_b64}.{payload_b64}".encode()
    try:
        signature = base64url_decode(sig_b64.encode())
        public_key = jwk.construct(key, algorithm=key.get("alg") or header.get("alg"))
    except (ValueError, JWKError):
        raise HTTPException(status_code=401, detail="Malformed token")
    if not public_key.verify(message, signature):
        raise HTTPException(status_code=401, detail="Bad signature")

    try:
        claims = _b64_json(payload_b64)
    except ValueError:
        raise HTTPException(status_code=401, detail="Malformed token")

    now = int(time.time())
    if now > claims.get("exp", 0):
        raise HTTPException(status_code=401, detail="Token expired")
    if claims.get("iss") != issuer():
        raise HTTPException(status_code=401, detail="Bad issuer")
    audience = os.getenv("IDENTITY_AUDIENCE")
    if audience and claims.get("aud") != audience:
        raise HTTPException(status_code=401, detail="Bad audience")
    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Token has no subject")

    return claims
