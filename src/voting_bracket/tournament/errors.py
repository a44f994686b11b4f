import dataclasses


class TournamentError(Exception):
    pass


class NotFound(TournamentError):
    def __init__(self, kind, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class InvalidReference(TournamentError):
    def __init__(self, kind, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind} reference: {identifier}")


class EmptySession(TournamentError):
    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(f"No votes found in session {session_id}")


class CompletionFailed(TournamentError):
    def __init__(self, session_id, cause):
        self.session_id = session_id
        self.cause = cause
        super().__init__(f"Failed to complete tournament {session_id}: {cause}")


@dataclasses.dataclass(frozen=True)
class AlreadyCompleted:
    """Returned, not raised: the user has already finished their tournament."""

    user_id: int
