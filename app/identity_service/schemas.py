"""
Identity and session state schemas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Authenticated principal as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user: Any) -> "Identity":
        """Build an identity from a Supabase ``User`` object."""
        return cls(id=str(user.id), email=getattr(user, "email", None))


class SessionStatus(str, Enum):
    UNRESOLVED = "unresolved"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionState:
    """
    Local view of whether, and as whom, the UI session is signed in.

    ``identity`` is only set when ``status`` is AUTHENTICATED.
    """

    status: SessionStatus
    identity: Optional[Identity] = None

    @classmethod
    def unresolved(cls) -> "SessionState":
        return cls(status=SessionStatus.UNRESOLVED)

    @classmethod
    def from_identity(cls, identity: Optional[Identity]) -> "SessionState":
        if identity is None:
            return cls(status=SessionStatus.ANONYMOUS)
        return cls(status=SessionStatus.AUTHENTICATED, identity=identity)

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED
