from fastapi import APIRouter, Depends
from app.core.rate_limiter import RateLimit, auth_limiter

router = APIRouter(dependencies=[Depends(RateLimit(auth_limiter))])

@router.post("/chat")
async def chat():
    return {"message": "AI chat - TODO"}
