from sqlalchemy.orm import DeclarativeBase

from voting_bracket.schema.postgres import metadata


class Base(DeclarativeBase):
    metadata = metadata
