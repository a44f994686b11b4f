from sqlalchemy import func

from voting_bracket.models.user import CallerPayload, User
from voting_bracket.util.logging import get_logger

logger = get_logger(__name__)


def sync_user(db, payload: CallerPayload) -> int:
    """Create or refresh the user row for a verified caller."""
    user = db.get(User, payload.user_id)

    if user is None:
        logger.info("Creating user", user_id=payload.user_id)
        user = User(tg_id=payload.user_id)
        db.add(user)

    user.username = payload.username
    user.full_name = payload.full_name
    user.last_vote_at = func.now()
    db.flush()

    return user.tg_id
