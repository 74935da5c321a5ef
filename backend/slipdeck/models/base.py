"""Shared pydantic configuration for wire models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model that reads and writes the server's camelCase JSON.

    Python code uses snake_case field names; ``model_dump(by_alias=True)``
    produces the camelCase form expected by the frontend.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
