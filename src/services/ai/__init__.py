"""Init file for AI services."""

from .exceptions import GenerationConfigurationError, GenerationServiceError
from .json_recovery import StructuredOutputExtractor, extract_json


__all__ = [
    "GenerationConfigurationError",
    "GenerationServiceError",
    "StructuredOutputExtractor",
    "extract_json",
]
