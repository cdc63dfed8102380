import time
from typing import Optional
import jwt

# Session tokens are HS256 JWTs with claims iss, sub (phone number), iat and exp.

class InvalidToken(ValueError):
    pass

class TokenClaims:
    def __init__(self, iss: str, sub: str, iat: int, exp: int):
        self.iss = iss
        self.sub = sub
        self.iat = iat
        self.exp = exp

    @property
    def phone(self) -> str:
        return self.sub

    def to_dict(self) -> dict:
        return {"iss": self.iss, "sub": self.sub, "iat": self.iat, "exp": self.exp}

class TokenSigner:
    def __init__(self, secret_key: str, issuer: str, ttl_seconds: int, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.key = secret_key
        self.issuer = issuer
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    def encode(self, subject: str, now: Optional[float] = None) -> str:
        issued_at = int(now if now is not None else time.time())
        claims = TokenClaims(self.issuer, subject, issued_at, issued_at + self.ttl_seconds)
        return jwt.encode(claims.to_dict(), self.key, algorithm=self.algorithm)

    def decode(self, token: str, now: Optional[float] = None) -> TokenClaims:
        """
        Verifies signature, issuer and expiry and returns the claims.
        Raises InvalidToken on any failure.
        """
        try:
            payload = jwt.decode(
                token,
                self.key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                # expiry is checked below against the caller's clock
                options={"require": ["iss", "sub", "iat", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidToken(str(e))

        try:
            claims = TokenClaims(str(payload["iss"]), str(payload["sub"]), int(payload["iat"]), int(payload["exp"]))
        except (ValueError, TypeError):
            raise InvalidToken("Malformed claims")

        current = now if now is not None else time.time()
        if claims.exp <= current:
            raise InvalidToken("Token expired")
        return claims
