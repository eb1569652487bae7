"""Object-to-object mapping between internal types and response models."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel

from api_template.utils.exceptions import MappingNotFoundError

# =============================================================================
#   Logger
# =============================================================================
logger = logging.getLogger(Path(__file__).stem)

D = TypeVar("D")
Converter = Callable[[Any], Any]


# =============================================================================
#   ObjectMapper
# =============================================================================
class ObjectMapper:
    """Registry of source → destination conversions.

    A pair registered without a converter is mapped by validating the
    source's attributes into the destination pydantic model.
    """

    def __init__(self) -> None:
        self._maps: Dict[Tuple[type, type], Optional[Converter]] = {}

    # -------------------------------------------------------------------------
    def register(
        self,
        source: type,
        destination: type,
        converter: Optional[Converter] = None,
    ) -> "ObjectMapper":
        if converter is None and not issubclass(destination, BaseModel):
            raise TypeError(
                f"A converter is required to map into non-pydantic type '{destination.__name__}'."
            )
        self._maps[(source, destination)] = converter
        logger.debug("Registered mapping %s -> %s", source.__name__, destination.__name__)
        return self

    # -------------------------------------------------------------------------
    def add_profile(self, profile: "MappingProfile") -> "ObjectMapper":
        profile.configure(self)
        return self

    # -------------------------------------------------------------------------
    def has_mapping(self, source: type, destination: type) -> bool:
        return self._find(source, destination)[0]

    # -------------------------------------------------------------------------
    def map(self, obj: Any, destination: Type[D]) -> D:
        """Map `obj` into `destination`.

        The exact source type is looked up first, then its base classes.

        Raises:
            MappingNotFoundError: If no mapping covers the pair.
        """
        found, converter = self._find(type(obj), destination)
        if not found:
            raise MappingNotFoundError(type(obj), destination)

        if converter is not None:
            return converter(obj)
        return destination.model_validate(obj, from_attributes=True)

    # -------------------------------------------------------------------------
    def _find(self, source: type, destination: type) -> Tuple[bool, Optional[Converter]]:
        for candidate in source.__mro__:
            key = (candidate, destination)
            if key in self._maps:
                return True, self._maps[key]
        return False, None


# =============================================================================
#   MappingProfile
# =============================================================================
class MappingProfile:
    """Groups related registrations; subclasses override `configure`."""

    def configure(self, mapper: ObjectMapper) -> None:
        raise NotImplementedError


# =============================================================================
#   Dependency
# =============================================================================
def get_mapper(request: Request) -> ObjectMapper:
    """FastAPI dependency that resolves the ObjectMapper from app state."""
    return request.app.state.mapper
