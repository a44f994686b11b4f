from . import candidate, tournament, user

__all__ = [
    "candidate",
    "tournament",
    "user",
]
