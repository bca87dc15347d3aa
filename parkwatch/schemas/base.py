# parkwatch/schemas/base.py
"""Shared pydantic base — the HTTP API speaks camelCase, the code speaks snake_case."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
