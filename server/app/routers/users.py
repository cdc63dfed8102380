from fastapi import APIRouter, Depends
from app.auth.dependencies import get_current_claims
from app.auth.tokens import TokenClaims

router = APIRouter()

@router.get("/me")
async def me(claims: TokenClaims = Depends(get_current_claims)):
    # TODO: load the profile once a user store exists
    return {"phone": claims.phone}
