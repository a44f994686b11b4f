from ._candidate import candidate
from ._session_vote import session_vote
from ._tournament_session import tournament_session
from ._user import user
from ._vote import vote

__all__ = [
    "candidate",
    "session_vote",
    "tournament_session",
    "user",
    "vote",
]
