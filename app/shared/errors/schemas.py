"""
Response envelopes shared by every endpoint.

Every success body carries ``success: true``; every error body carries
``success: false`` and an ``error`` object. Field names are serialized in
camelCase.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessEnvelope(CamelModel):
    """Common shape of every successful response."""

    success: bool = True
    message: str


class ErrorDetailSchema(CamelModel):
    """One field-level problem."""

    field: str
    message: str
    rejected_value: Any = None
    location: str = "body"


class ErrorBody(CamelModel):
    """The ``error`` object of an error envelope."""

    message: str
    code: str
    status_code: int
    timestamp: datetime
    correlation_id: str
    details: Optional[list[ErrorDetailSchema]] = None
    retry_after: Optional[int] = None
    stack: Optional[list[str]] = None


class ErrorResponse(CamelModel):
    """Error envelope rendered by the error terminal only."""

    success: bool = False
    error: ErrorBody
