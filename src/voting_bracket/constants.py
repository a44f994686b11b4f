import enum

DEFAULT_ELO_RATING = 1200

# Initial opaque client state for a fresh tournament session
EMPTY_CLIENT_STATE = "{}"


class SESSION_STATE(enum.Enum):
    NONE = "NONE"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
