from fastapi import APIRouter, Depends
from app.auth.handshake import AuthHandshake, get_handshake
from app.auth.schemas import (
    RefreshTokenRequest,
    RefreshTokenResponse,
    SendCodeRequest,
    SendCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from app.core.errors import ValidationError, VerificationFailure

router = APIRouter()

# The /send-otp, /verify-otp and /refresh paths are kept for older mobile builds
@router.post("/send-code", response_model=SendCodeResponse, response_model_exclude_none=True)
@router.post("/send-otp", response_model=SendCodeResponse, response_model_exclude_none=True,
             include_in_schema=False)
async def send_code(body: SendCodeRequest, handshake: AuthHandshake = Depends(get_handshake)):
    """Send a one-time code to the phone number."""
    phone = body.phone_number
    if not handshake.is_valid_phone(phone):
        raise ValidationError(f"Invalid phone number. Must be in format {handshake.phone_format}")

    issued = handshake.issue(phone)
    # Only present when the handshake exposes issued codes
    return {"message": "OTP sent successfully", "devCode": issued.value}

@router.post("/verify-code", response_model=VerifyCodeResponse)
@router.post("/verify-otp", response_model=VerifyCodeResponse, include_in_schema=False)
async def verify_code(body: VerifyCodeRequest, handshake: AuthHandshake = Depends(get_handshake)):
    """Verify the code and return a session token."""
    if not body.phone_number or not body.code:
        raise ValidationError("Phone number and OTP are required")

    verdict = handshake.verify(body.phone_number, body.code)
    if not verdict.success:
        raise VerificationFailure()

    return {"message": "Login successful", "token": verdict.token, "user": verdict.user.to_dict()}

@router.post("/refresh-token", response_model=RefreshTokenResponse)
@router.post("/refresh", response_model=RefreshTokenResponse, include_in_schema=False)
async def refresh_token(body: RefreshTokenRequest):
    # TODO: validate and rotate the token via AuthHandshake.decode_token; currently echoes it back
    return {"message": "Token refreshed", "token": body.token}
