"""Response envelope shared by the resource routers."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Wraps a payload with request-level metadata.

    Attributes:
        data: A single resource or a list of resources
        metadata: Extra information, e.g. the caller's set-level permission
            types when ``?authorization=true`` is passed
    """

    data: T
    metadata: dict[str, Any] = Field(default_factory=dict)
