# =============================================================================
# core/models/base.py - Shared Model Configuration
# =============================================================================
# The public JSON API speaks camelCase while the database and Python code use
# snake_case. Every API model inherits from ApiModel to get the aliases.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
