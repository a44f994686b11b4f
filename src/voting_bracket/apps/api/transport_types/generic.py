import humps
from pydantic import BaseModel, ConfigDict


class Base(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,  # Enables ORM model parsing
        alias_generator=humps.camelize,  # Converts snake_case to camelCase
        populate_by_name=True,  # Allows accessing fields by snake_case name
    )
