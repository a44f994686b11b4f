import voting_bracket.schema.postgres as schema

from ._base import Base


class Candidate(Base):
    __table__ = schema.voting.candidate

    @property
    def winrate(self):
        if not self.matches:
            return 0
        return round(self.wins * 100.0 / self.matches, 2)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image_path": self.image_path,
            "wins": self.wins,
            "matches": self.matches,
            "elo_rating": self.elo_rating,
            "winrate": self.winrate,
        }


__all__ = ["Candidate"]
