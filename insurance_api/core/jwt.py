"""JWT verification for bearer tokens issued by the identity provider.

Only verification happens here; token issuance lives with the identity
provider. Tokens are HS256-signed with a shared secret.
"""

from typing import Optional

import jwt

from insurance_api.core.config import AuthSettings, settings
from insurance_api.schemas.auth import JWTClaims
from insurance_api.utils.logging import get_logger

LOGGER = get_logger(__name__)


class JWTVerifier:
    """Verifies access tokens and returns their claims."""

    def __init__(self, auth_settings: Optional[AuthSettings] = None):
        auth_settings = auth_settings or settings.auth
        self.jwt_secret = auth_settings.jwt_secret
        self.algorithm = auth_settings.jwt_algorithm
        self.audience = auth_settings.jwt_audience
        self.issuer = auth_settings.jwt_issuer

    async def verify_token(self, token: str) -> JWTClaims:
        """Verify and decode a JWT token.

        Args:
            token: JWT access token from Authorization header

        Returns:
            Decoded and validated JWT claims

        Raises:
            jwt.InvalidTokenError: If token is invalid, expired or lacks claims
        """
        if not self.jwt_secret:
            raise jwt.InvalidTokenError("JWT_SECRET is not configured")

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_exp": True,
                    "verify_aud": self.audience is not None,
                    "verify_iss": self.issuer is not None,
                    "require": ["sub", "role", "exp"],
                },
            )
            claims = JWTClaims(**payload)
            int(claims.sub)
        except jwt.ExpiredSignatureError as e:
            LOGGER.warning(f"Token expired: {e}")
            raise jwt.InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            LOGGER.warning(f"Invalid token: {e}")
            raise
        except ValueError as e:
            # pydantic validation errors are ValueErrors too
            LOGGER.warning(f"Invalid token claims: {e}")
            raise jwt.InvalidTokenError("Token claims are invalid") from e

        LOGGER.debug(f"Successfully verified token for user: {claims.sub}")
        return claims


jwt_verifier = JWTVerifier()
