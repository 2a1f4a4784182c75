"""
Shared schema base.

The UI client speaks camelCase JSON (``fullName``, ``createdAt``); Python code
uses snake_case. Every request/response schema derives from CamelModel so
both spellings are accepted on input and camelCase is emitted on output.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
