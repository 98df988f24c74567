"""Pydantic Schemas — request/response models for API endpoints.

Invariants:
    - JSON uses camelCase (dataVencimento, accessToken); Python uses snake_case
    - Request models are lenient (all fields optional): rules live in core/validation.py
      so every failure yields the same field -> messages mapping

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API schemas — camelCase on the wire, populate by either name."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )
