"""OIDC / Auth0 bearer token verification and requester identity.

Two FastAPI dependencies live here:

* ``get_current_user`` validates an incoming ``Authorization: Bearer <token>``
  header against the configured Auth0 tenant and returns the local ``User``
  (auto-provisioned on first sight). Returns None when auth is disabled.
* ``get_requester_id`` resolves the id every idea operation is performed on
  behalf of. With auth enabled it is the verified user's id; with auth
  disabled (local development, tests) it is read from the ``X-User-Id``
  header.

Implementation notes:
* JWKS are fetched from https://<domain>/.well-known/jwks.json and cached.
* We use python-jose for JWT verification.
* The ``sub`` claim is treated as the stable external user id; ``email`` is used
  to auto-provision a local user record if one does not exist yet.
"""
from __future__ import annotations

import time
import uuid
import httpx
from functools import lru_cache
from typing import Any, Optional
from jose import jwt, jwk
from jose.utils import base64url_decode
from fastapi import Depends, HTTPException, status
from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.config import get_settings
from ideaboard.db.session import get_db
from ideaboard.models.user import User
from ideaboard.repositories.user import get_by_id as repo_get_by_id, create as repo_create

class JWKSCache:
    def __init__(self, ttl_seconds: int) -> None:
        self._ttl = ttl_seconds
        self._expires_at = 0.0
        self._jwks: dict[str, Any] | None = None

    async def get(self, domain: str) -> dict[str, Any]:
        now = time.time()
        if self._jwks and now < self._expires_at:
            return self._jwks
        url = f"https://{domain.rstrip('/')}/.well-known/jwks.json"
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.get(url)
            if resp.status_code != 200:
                raise RuntimeError(f"Failed to fetch JWKS: {resp.status_code}")
            data = resp.json()
        self._jwks = data
        self._expires_at = now + self._ttl
        return data

@lru_cache
def _jwks_cache(ttl: int) -> JWKSCache:
    return JWKSCache(ttl)

async def _verify_token(token: str, settings) -> dict[str, Any]:
    if not settings.auth0_domain or not settings.auth0_api_audience:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Auth0 not configured")
    if token.count('.') != 2:
        raise HTTPException(status_code=401, detail="Malformed bearer token")
    domain = settings.auth0_issuer.removeprefix("https://").rstrip('/')
    cache = _jwks_cache(settings.auth_jwks_cache_ttl_seconds)
    jwks = await cache.get(domain)
    unverified_header = jwt.get_unverified_header(token)
    kid = unverified_header.get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Missing kid header")
    key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
    if not key:
        raise HTTPException(status_code=401, detail="Unknown kid")
    public_key = jwk.construct(key)
    message, encoded_signature = token.rsplit('.', 1)
    decoded_signature = base64url_decode(encoded_signature.encode())
    if not public_key.verify(message.encode(), decoded_signature):
        raise HTTPException(status_code=401, detail="Invalid signature")
    claims = jwt.decode(
        token,
        key,
        algorithms=settings.auth_algorithms,
        audience=settings.auth0_api_audience,
        issuer=settings.auth0_issuer,
    )
    return claims

async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db),
    settings = Depends(get_settings),
) -> Optional[User]:
    """Validate bearer token and return associated local User.

    If auth is disabled, returns None.
    """
    if not settings.auth_enabled:
        return None
    # If middleware already validated the token it will have placed claims on request.state
    if hasattr(request.state, "verified_claims"):
        claims = request.state.verified_claims  # type: ignore
    else:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Missing bearer token")
        token = authorization[len("Bearer "):].strip()
        try:
            claims = await _verify_token(token, settings)
        except HTTPException:
            raise
        except Exception as e:  # catch broader jose/httpx errors
            raise HTTPException(status_code=401, detail="Token verification failed") from e

    external_sub = claims.get("sub")
    email = claims.get("email")
    if not external_sub:
        raise HTTPException(status_code=401, detail="Missing sub claim")
    # Map external sub to a UUID (stable namespace). If sub is already a UUID, use it.
    try:
        user_id = uuid.UUID(external_sub)
    except ValueError:
        user_id = uuid.uuid5(uuid.NAMESPACE_URL, f"auth0:{external_sub}")

    user = await repo_get_by_id(session, user_id)
    if not user:
        if not email:
            raise HTTPException(status_code=404, detail="User not provisioned and email missing")
        user = await repo_create(session, email=email, id=user_id)
        await session.commit()
    return user

async def get_requester_id(
    current_user: Optional[User] = Depends(get_current_user),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    session: AsyncSession = Depends(get_db),
) -> uuid.UUID:
    """Identity every idea / calendar operation runs on behalf of."""
    if current_user is not None:
        return current_user.id
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing requester identity")
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Malformed requester identity")
    # the header is unverified; ideas must point at a real user row
    if await repo_get_by_id(session, user_id) is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown requester")
    return user_id

__all__ = ["get_current_user", "get_requester_id"]
