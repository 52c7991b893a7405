# taskflow/schemas/envelope.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

class CamelModel(BaseModel):
    """Base for every payload that crosses the wire; fields are camelCase in JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None

class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[str]] = None
