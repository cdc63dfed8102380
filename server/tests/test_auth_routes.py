import re
import pytest
from fastapi.testclient import TestClient
from app.auth.handshake import AuthHandshake, HandshakeConfig, get_handshake
from main import app

client = TestClient(app)

PHONE = "+919876543210"

def use_handshake(config: HandshakeConfig) -> AuthHandshake:
    handshake = AuthHandshake(config)
    app.dependency_overrides[get_handshake] = lambda: handshake
    return handshake

@pytest.fixture
def dev_handshake():
    return use_handshake(HandshakeConfig(expose_issued_code=True, secret_key="test-secret"))

@pytest.fixture
def prod_handshake():
    return use_handshake(HandshakeConfig(expose_issued_code=False, secret_key="test-secret"))

def test_send_code_returns_dev_code(dev_handshake):
    response = client.post("/api/auth/send-code", json={"phoneNumber": PHONE})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "OTP sent successfully"
    assert re.fullmatch(r"\d{6}", data["devCode"])

@pytest.mark.parametrize("phone", [
    "9876543210",
    "+91987654321",
    "+9198765432100",
    "+449876543210",
    "+91 9876543210",
    "+9198765abcde",
    "",
])
def test_send_code_rejects_malformed_phone(dev_handshake, phone):
    response = client.post("/api/auth/send-code", json={"phoneNumber": phone})

    assert response.status_code == 400
    error = response.json()["error"]
    assert "+91XXXXXXXXXX" in error["message"]
    assert error["statusCode"] == 400
    assert "timestamp" in error

def test_send_code_rejects_missing_phone(dev_handshake):
    response = client.post("/api/auth/send-code", json={})
    assert response.status_code == 400

def test_send_code_rejects_non_json_body(dev_handshake):
    response = client.post("/api/auth/send-code", content=b"not json",
                           headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "message" in response.json()["error"]

def test_send_otp_alias_accepts_phone_field(dev_handshake):
    response = client.post("/api/auth/send-otp", json={"phone": PHONE})
    assert response.status_code == 200
    assert len(response.json()["devCode"]) == 6

def test_send_code_hides_code_when_not_exposed(prod_handshake):
    response = client.post("/api/auth/send-code", json={"phoneNumber": PHONE})

    assert response.status_code == 200
    assert response.json() == {"message": "OTP sent successfully"}

def test_verify_code_accepts_any_six_digits(dev_handshake):
    client.post("/api/auth/send-code", json={"phoneNumber": PHONE})
    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": "123456"})

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["phone"] == PHONE
    assert data["user"]["isNewUser"] is False
    assert data["user"]["id"].startswith("user_")
    assert data["token"]

def test_verified_token_decodes_to_phone(dev_handshake):
    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": "000000"})

    claims = dev_handshake.decode_token(response.json()["token"])
    assert claims is not None
    assert claims.phone == PHONE

@pytest.mark.parametrize("code", ["12345", "1234567", "12a456", "abcdef", " 123456", "１２３４５６"])
def test_verify_code_rejects_malformed_code(dev_handshake, code):
    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": code})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid or expired OTP"

@pytest.mark.parametrize("body", [
    {"phoneNumber": PHONE},
    {"code": "123456"},
    {"phoneNumber": "", "code": "123456"},
    {},
])
def test_verify_code_requires_phone_and_code(dev_handshake, body):
    response = client.post("/api/auth/verify-code", json=body)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Phone number and OTP are required"

def test_verify_otp_alias_accepts_legacy_fields(dev_handshake):
    response = client.post("/api/auth/verify-otp", json={"phone": PHONE, "otp": "654321"})
    assert response.status_code == 200
    assert response.json()["user"]["phone"] == PHONE

def test_verify_code_checks_issued_code_when_not_exposed(prod_handshake):
    client.post("/api/auth/send-code", json={"phoneNumber": PHONE})
    issued = prod_handshake.store.get(PHONE, prod_handshake.clock()).code
    wrong = "111111" if issued != "111111" else "222222"

    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": wrong})
    assert response.status_code == 401

    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": issued})
    assert response.status_code == 200

    # Single use
    response = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": issued})
    assert response.status_code == 401

def test_refresh_token_echoes_token():
    response = client.post("/api/auth/refresh-token", json={"token": "abc.def"})

    assert response.status_code == 200
    assert response.json() == {"message": "Token refreshed", "token": "abc.def"}

def test_refresh_alias():
    response = client.post("/api/auth/refresh", json={"token": "whatever"})
    assert response.json()["token"] == "whatever"

def test_users_me_with_verified_token(dev_handshake):
    token = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": "123456"}).json()["token"]

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"phone": PHONE}

def test_users_me_requires_token(dev_handshake):
    response = client.get("/api/users/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"

def test_users_me_rejects_tampered_token(dev_handshake):
    token = client.post("/api/auth/verify-code", json={"phoneNumber": PHONE, "code": "123456"}).json()["token"]
    header, payload, signature = token.split(".")
    forged = header + "." + payload[:-2] + ("AA" if payload[-2:] != "AA" else "BB") + "." + signature

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401
