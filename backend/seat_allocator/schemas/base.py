"""Schema Base - camelCase wire aliases for every API model.

Invariants:
    - Python attributes are snake_case, JSON keys are camelCase
    - Both spellings accepted on input (populate_by_name)
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(CamelModel):
    success: bool = True
