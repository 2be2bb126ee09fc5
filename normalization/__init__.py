from .normalizer import (
    ParseFailure,
    extract_json_text,
    normalize,
    scan,
    MAX_RAW_CHARS,
)

__all__ = [
    "ParseFailure",
    "extract_json_text",
    "normalize",
    "scan",
    "MAX_RAW_CHARS",
]
