from sqlalchemy.orm import Mapped, relationship

import voting_bracket.schema.postgres as schema
from voting_bracket.constants import SESSION_STATE
from voting_bracket.models.candidate import Candidate

from ._base import Base


class TournamentSession(Base):
    __table__ = schema.voting.tournament_session
    __mapper_args__ = {"eager_defaults": True}

    @property
    def state(self):
        return SESSION_STATE.COMPLETED if self.is_completed else SESSION_STATE.ACTIVE


class SessionVote(Base):
    __table__ = schema.voting.session_vote


class Vote(Base):
    __table__ = schema.voting.vote
    __mapper_args__ = {"eager_defaults": True}

    winner: Mapped["Candidate"] = relationship(
        "Candidate", uselist=False, foreign_keys=[schema.voting.vote.c.winner_id]
    )
    loser: Mapped["Candidate"] = relationship(
        "Candidate", uselist=False, foreign_keys=[schema.voting.vote.c.loser_id]
    )

    def to_dict(self):
        return {
            "id": self.id,
            "created": self.created,
            "comment": self.comment,
            "winner_id": self.winner_id,
            "winner_name": self.winner.name if self.winner else None,
            "winner_image": self.winner.image_path if self.winner else None,
            "loser_id": self.loser_id,
            "loser_name": self.loser.name if self.loser else None,
            "loser_image": self.loser.image_path if self.loser else None,
        }


__all__ = [
    "SessionVote",
    "TournamentSession",
    "Vote",
]
