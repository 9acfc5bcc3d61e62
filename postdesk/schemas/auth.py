from dataclasses import dataclass
from uuid import UUID

from pydantic import BaseModel


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    username: str
    user_id: UUID
    jti: str
    token_type: str = "access"


@dataclass(frozen=True)
class Principal:
    """The authenticated actor of a request, passed explicitly to whatever needs it."""

    id: UUID
    username: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
