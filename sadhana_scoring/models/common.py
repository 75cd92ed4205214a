"""Shared pydantic base for all engine models.

Persisted records and the configuration store use camelCase keys
(``readingMinutes``, ``sleepTimeScoring``); Python code uses snake_case.
Every model accepts either spelling and dumps camelCase with ``by_alias``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """BaseModel that round-trips camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump to a JSON-ready dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
