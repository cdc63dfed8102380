from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from app.auth.handshake import AuthHandshake, get_handshake
from app.auth.tokens import TokenClaims
from app.core.errors import UnauthorizedError

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    handshake: AuthHandshake = Depends(get_handshake),
) -> TokenClaims:
    if credentials is None:
        raise UnauthorizedError("Missing bearer token", headers={"WWW-Authenticate": "Bearer"})

    claims = handshake.decode_token(credentials.credentials)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token", headers={"WWW-Authenticate": "Bearer"})
    return claims
