from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ErrorResponse(BaseModel, Generic[T]):
    """Standard error response envelope.

    Used for validation failures (400), authentication failures (401)
    and unhandled exceptions (500). `data` carries an optional payload,
    e.g. the field → messages map of a validation failure.
    """

    code: str
    message: str
    data: Optional[T] = None

    def to_content(self) -> Dict[str, Any]:
        """JSON-ready body; a missing `data` is left out entirely."""
        return self.model_dump(mode="json", exclude_none=True)
