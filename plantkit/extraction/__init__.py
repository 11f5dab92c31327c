"""Document structure extraction (the AI pass of the PFD import)."""

from .openai_extractor import (
    StructureExtractor,
    OpenAIExtractor,
    ExtractionError,
)

__all__ = [
    "StructureExtractor",
    "OpenAIExtractor",
    "ExtractionError",
]
