import logging
import re
import secrets
import time
from typing import Callable, Optional
from app.auth.code_store import CodeStore
from app.auth.tokens import InvalidToken, TokenClaims, TokenSigner
from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"[0-9]{6}")

class HandshakeConfig:
    def __init__(self, expose_issued_code: bool = False, code_ttl_seconds: int = 600,
                 secret_key: str = settings.SECRET_KEY, issuer: str = settings.TOKEN_ISSUER,
                 token_ttl_seconds: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
                 country_code: str = settings.PHONE_COUNTRY_CODE,
                 algorithm: str = settings.ALGORITHM):
        self.expose_issued_code = expose_issued_code
        self.code_ttl_seconds = code_ttl_seconds
        self.secret_key = secret_key
        self.issuer = issuer
        self.token_ttl_seconds = token_ttl_seconds
        self.country_code = country_code
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, source: Settings = settings) -> "HandshakeConfig":
        return cls(
            expose_issued_code=source.is_development,
            code_ttl_seconds=source.OTP_TTL_MINUTES * 60,
            secret_key=source.SECRET_KEY,
            issuer=source.TOKEN_ISSUER,
            token_ttl_seconds=source.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            country_code=source.PHONE_COUNTRY_CODE,
            algorithm=source.ALGORITHM,
        )

class IssuedCode:
    def __init__(self, value: Optional[str], issued_at: float, expires_at: float):
        # value is None when the code must not leave the server
        self.value = value
        self.issued_at = issued_at
        self.expires_at = expires_at

class User:
    def __init__(self, id: str, phone: str, is_new_user: bool = False):
        self.id = id
        self.phone = phone
        self.is_new_user = is_new_user

    def to_dict(self) -> dict:
        return {"id": self.id, "phone": self.phone, "isNewUser": self.is_new_user}

class Verdict:
    def __init__(self, success: bool, token: Optional[str] = None, user: Optional[User] = None):
        self.success = success
        self.token = token
        self.user = user

    @classmethod
    def failed(cls) -> "Verdict":
        return cls(False)

def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))

class AuthHandshake:
    """
    Phone OTP login.

    issue() mints a 6 digit code for a phone number, verify() checks a code and
    hands back a signed session token plus a user record. When the config exposes
    issued codes (development) any well formed code is accepted; otherwise the
    code must match the last one issued for that phone and is single use.
    SMS delivery and user lookup are not wired up.
    """

    def __init__(self, config: HandshakeConfig, store: Optional[CodeStore] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config
        self.store = store if store is not None else CodeStore()
        self.clock = clock
        self.signer = TokenSigner(config.secret_key, config.issuer, config.token_ttl_seconds, config.algorithm)
        self.phone_pattern = re.compile(r"\+%s[0-9]{10}" % re.escape(config.country_code))

    @property
    def phone_format(self) -> str:
        return f"+{self.config.country_code}XXXXXXXXXX"

    def is_valid_phone(self, phone) -> bool:
        return isinstance(phone, str) and bool(self.phone_pattern.fullmatch(phone))

    @staticmethod
    def is_valid_code(code) -> bool:
        return isinstance(code, str) and bool(CODE_PATTERN.fullmatch(code))

    def issue(self, phone: str) -> IssuedCode:
        code = generate_code()
        now = self.clock()
        expires_at = now + self.config.code_ttl_seconds

        if self.config.expose_issued_code:
            # verify() accepts any well formed code in this mode, nothing to store
            logger.info("[DEV MODE] OTP for %s: %s", phone, code)
            return IssuedCode(code, now, expires_at)

        self.store.put(phone, code, expires_at, now)
        # TODO: dispatch through an SMS provider once credentials are configured
        logger.info("OTP issued for %s; SMS dispatch not configured", phone)
        return IssuedCode(None, now, expires_at)

    def verify(self, phone: str, code: str) -> Verdict:
        if not self.is_valid_code(code):
            return Verdict.failed()

        now = self.clock()
        if not self.config.expose_issued_code and not self.store.consume(phone, code, now):
            logger.info("OTP verification failed for %s", phone)
            return Verdict.failed()

        token = self.signer.encode(phone, now)
        user = User(id=f"user_{int(now * 1000)}", phone=phone, is_new_user=False)
        return Verdict(True, token=token, user=user)

    def decode_token(self, token: str) -> Optional[TokenClaims]:
        try:
            return self.signer.decode(token, self.clock())
        except InvalidToken as e:
            logger.debug("Rejected token: %s", e)
            return None

handshake = AuthHandshake(HandshakeConfig.from_settings())

def get_handshake() -> AuthHandshake:
    return handshake
