from .content import (
    AIContentError,
    ContentGenerationError,
    JSONGenerationError,
    generate_content,
    generate_json,
)
from .json_extract import extract_json_text
from .types import TextGenerator

__all__ = [
    "AIContentError",
    "ContentGenerationError",
    "JSONGenerationError",
    "TextGenerator",
    "extract_json_text",
    "generate_content",
    "generate_json",
]
