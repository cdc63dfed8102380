from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

class SendCodeRequest(BaseModel):
    phone_number: Optional[str] = Field(None, validation_alias=AliasChoices("phoneNumber", "phone"))

class VerifyCodeRequest(BaseModel):
    phone_number: Optional[str] = Field(None, validation_alias=AliasChoices("phoneNumber", "phone"))
    code: Optional[str] = Field(None, validation_alias=AliasChoices("code", "otp"))

class RefreshTokenRequest(BaseModel):
    token: Optional[str] = None

class UserOut(BaseModel):
    id: str
    phone: str
    isNewUser: bool

class SendCodeResponse(BaseModel):
    message: str
    devCode: Optional[str] = None

class VerifyCodeResponse(BaseModel):
    message: str
    token: str
    user: UserOut

class RefreshTokenResponse(BaseModel):
    message: str
    token: Optional[str] = None
