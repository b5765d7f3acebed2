"""Authentication schemas for verified bearer tokens.

Tokens are issued by the identity provider; this service only verifies
them and turns the claims into an :class:`Actor`.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from insurance_api.schemas.enums import UserRole


class JWTClaims(BaseModel):
    """Claims extracted from a verified access token."""

    sub: str = Field(..., description="Subject (integer user ID)")
    role: UserRole = Field(..., description="Actor role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")
    iss: Optional[str] = Field(None, description="Token issuer")
    aud: Optional[str] = Field(None, description="Audience")
    email: Optional[str] = Field(None, description="User email")


class Actor(BaseModel):
    """Authenticated caller passed into every service operation."""

    model_config = ConfigDict(frozen=True)

    actor_id: int = Field(..., description="User ID of the caller")
    role: UserRole = Field(..., description="Role of the caller")

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


__all__ = ["JWTClaims", "Actor"]
