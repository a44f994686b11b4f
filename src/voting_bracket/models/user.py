from typing import Optional

from pydantic import BaseModel

import voting_bracket.schema.postgres as schema

from ._base import Base


class CallerPayload(BaseModel):
    """Verified caller identity as handed over by the identity provider."""

    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or None


class User(Base):
    __table__ = schema.voting.user

    def to_dict(self):
        return {
            "tg_id": self.tg_id,
            "username": self.username,
            "full_name": self.full_name,
            "last_vote_at": self.last_vote_at,
        }


__all__ = ["CallerPayload", "User"]
