import time

import jwt
import pytest

from insurance_api.core.config import AuthSettings
from insurance_api.core.jwt import JWTVerifier
from insurance_api.schemas.enums import UserRole


@pytest.fixture
def verifier():
    return JWTVerifier(AuthSettings(JWT_SECRET="unit-test-secret", JWT_ALGORITHM="HS256"))


def _token(secret: str = "unit-test-secret", **claims) -> str:
    payload = {"sub": "12", "role": "agent", "exp": int(time.time()) + 600}
    payload.update(claims)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, secret, algorithm="HS256")


@pytest.mark.asyncio
async def test_verify_valid_token(verifier):
    claims = await verifier.verify_token(_token(email="agent@example.com"))

    assert claims.sub == "12"
    assert claims.role == UserRole.AGENT
    assert claims.email == "agent@example.com"


@pytest.mark.asyncio
async def test_expired_token(verifier):
    with pytest.raises(jwt.InvalidTokenError, match="expired"):
        await verifier.verify_token(_token(exp=int(time.time()) - 60))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "claims",
    [
        {"role": None},
        {"role": "superuser"},
        {"sub": "not-a-number"},
    ],
)
async def test_invalid_claims(verifier, claims):
    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(_token(**claims))


@pytest.mark.asyncio
async def test_wrong_signature(verifier):
    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(_token(secret="another-secret"))


@pytest.mark.asyncio
async def test_missing_secret():
    verifier = JWTVerifier(AuthSettings(JWT_SECRET=""))

    with pytest.raises(jwt.InvalidTokenError, match="not configured"):
        await verifier.verify_token(_token())


@pytest.mark.asyncio
async def test_audience_checked_when_configured():
    verifier = JWTVerifier(AuthSettings(JWT_SECRET="unit-test-secret", JWT_AUDIENCE="insurance-api"))

    claims = await verifier.verify_token(_token(aud="insurance-api"))
    assert claims.aud == "insurance-api"

    with pytest.raises(jwt.InvalidTokenError):
        await verifier.verify_token(_token(aud="someone-else"))
