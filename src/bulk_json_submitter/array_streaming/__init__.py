"""Streaming array reader exports."""

from .streaming_array_reader import (
    DEFAULT_CHUNK_SIZE,
    ArrayElement,
    ArrayElementStream,
    DocumentParseError,
    ElementParseError,
    InputOpenError,
    open_array_stream,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ArrayElement",
    "ArrayElementStream",
    "DocumentParseError",
    "ElementParseError",
    "InputOpenError",
    "open_array_stream",
]
