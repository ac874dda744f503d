"""Incremental reader for documents holding one top-level JSON array."""

from __future__ import annotations

import json
import logging
import re
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

import ijson

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_COMMA = ord(",")
_OPEN_BRACKET = ord("[")
_CLOSE_BRACKET = ord("]")
_OPEN_BRACE = ord("{")
_CLOSE_BRACE = ord("}")

_DECODER = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")


class InputOpenError(OSError):
    """Raised when the input document cannot be opened."""


class DocumentParseError(Exception):
    """Raised when the input document does not start with a JSON array."""


class ElementParseError(Exception):
    """Raised when a single array element is not valid JSON."""

    def __init__(self, element_index: int, reason: str) -> None:
        super().__init__(f"array element {element_index}: {reason}")
        self.element_index = element_index
        self.reason = reason


@dataclass(frozen=True)
class ArrayElement:
    """One raw, validated array element in document order."""

    index: int
    raw: bytes


@dataclass(frozen=True)
class _Slot:
    raw: bytes
    complete: bool


class ArrayElementStream:
    """Forward-only iterator over the elements of an opened array document.

    Malformed elements are logged and skipped; iteration continues with the
    next element. An element left unbalanced at the end of input is split at
    the first comma after which well-formed elements resume, so one unclosed
    bracket does not swallow the rest of the array. The stream is not
    restartable.
    """

    def __init__(self, handle: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._handle = handle
        self._slots = _frame_array_slots(handle, chunk_size)
        self._next_index = 0
        self._skipped: list[ElementParseError] = []
        self._pending: deque[_Slot] = deque()

    @property
    def skipped_count(self) -> int:
        """Number of malformed elements skipped so far."""
        return len(self._skipped)

    @property
    def skipped(self) -> tuple[ElementParseError, ...]:
        return tuple(self._skipped)

    def __iter__(self) -> ArrayElementStream:
        return self

    def __next__(self) -> ArrayElement:
        while (slot := self._next_slot()) is not None:
            index = self._next_index
            self._next_index += 1
            if not slot.complete:
                slot = self._resynchronise(index, slot)
            try:
                return _decode_element(index, slot)
            except ElementParseError as exc:
                self._skipped.append(exc)
                logger.warning("Skipping malformed element: %s", exc)
        raise StopIteration

    def _next_slot(self) -> _Slot | None:
        if self._pending:
            return self._pending.popleft()
        return next(self._slots, None)

    def _resynchronise(self, index: int, slot: _Slot) -> _Slot:
        head, recovered = _split_unbalanced(slot)
        logger.warning(
            "Element %d is unbalanced: discarding %d bytes, resuming with %d recovered slots",
            index,
            len(head.raw),
            len(recovered),
        )
        self._pending.extendleft(reversed(recovered))
        return head

    def close(self) -> None:
        self._slots.close()
        self._handle.close()

    def __enter__(self) -> ArrayElementStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def open_array_stream(
    path: Path | str, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> ArrayElementStream:
    """Open ``path`` and confirm it starts with a JSON array.

    Args:
      path: Input document path.
      chunk_size: Number of bytes read from the file at a time.

    Returns:
      A stream yielding the array elements one by one.

    Raises:
      InputOpenError: If the file cannot be opened.
      DocumentParseError: If the first JSON token is not an opening bracket.
    """
    try:
        handle = Path(path).open("rb")
    except OSError as exc:
        raise InputOpenError(f"error opening file: {exc}") from exc
    try:
        _expect_array_start(handle)
        handle.seek(0)
    except BaseException:
        handle.close()
        raise
    return ArrayElementStream(handle, chunk_size=chunk_size)


def _expect_array_start(handle: BinaryIO) -> None:
    # One byte per read: the first event must surface before any element is tokenized.
    events = ijson.parse(handle, buf_size=1)
    try:
        _, event, _ = next(events)
    except StopIteration as exc:
        raise DocumentParseError("error reading opening bracket: document is empty") from exc
    except (ijson.JSONError, ValueError) as exc:
        raise DocumentParseError(f"error reading opening bracket: {exc}") from exc
    if event != "start_array":
        raise DocumentParseError(
            f"error reading opening bracket: expected a JSON array, found {event}"
        )


def _decode_element(index: int, slot: _Slot) -> ArrayElement:
    if not slot.complete:
        raise ElementParseError(index, "input ended before the element was complete")
    if not slot.raw:
        raise ElementParseError(index, "empty array element")
    try:
        json.loads(slot.raw)
    except ValueError as exc:
        raise ElementParseError(index, str(exc)) from exc
    return ArrayElement(index=index, raw=slot.raw)


def _frame_array_slots(handle: BinaryIO, chunk_size: int) -> Iterator[_Slot]:
    """Split the array body into raw element slots without decoding them.

    Tracks nesting depth and string literals so only top-level commas and the
    closing bracket end a slot. Content after the closing bracket is ignored.
    """
    opened = False
    depth = 0
    in_string = False
    escaped = False
    slot_count = 0
    slot = bytearray()
    while chunk := handle.read(chunk_size):
        for byte in chunk:
            if not opened:
                opened = byte == _OPEN_BRACKET
                continue
            if in_string:
                slot.append(byte)
                if escaped:
                    escaped = False
                elif byte == _BACKSLASH:
                    escaped = True
                elif byte == _QUOTE:
                    in_string = False
                continue
            if depth == 0 and byte in (_COMMA, _CLOSE_BRACKET):
                raw = bytes(slot).strip()
                slot.clear()
                if raw or byte == _COMMA or slot_count:
                    yield _Slot(raw=raw, complete=True)
                slot_count += 1
                if byte == _CLOSE_BRACKET:
                    return
                continue
            if byte == _QUOTE:
                in_string = True
            elif byte in (_OPEN_BRACKET, _OPEN_BRACE):
                depth += 1
            elif byte in (_CLOSE_BRACKET, _CLOSE_BRACE) and depth > 0:
                depth -= 1
            slot.append(byte)

    if depth or in_string:
        logger.warning("Input ended inside an unbalanced element")
    else:
        logger.warning("Input ended before the closing bracket of the array")
    raw = bytes(slot).strip()
    if raw:
        yield _Slot(raw=raw, complete=False)


def _split_unbalanced(slot: _Slot) -> tuple[_Slot, list[_Slot]]:
    """Find where well-formed elements resume inside an unbalanced slot.

    Each comma outside a string literal is tried in order as the end of the
    broken element. The first one followed by a decodable value and a ``,`` or
    ``]`` wins; the text before it stays as the malformed element.
    """
    text = slot.raw.decode("utf-8", "surrogateescape")
    for comma in _comma_offsets(text):
        pieces, rest = _decode_run(text, comma + 1)
        if not pieces:
            continue
        recovered = [_Slot(raw=_encode(piece), complete=True) for piece in pieces]
        if rest:
            recovered.append(_Slot(raw=_encode(rest), complete=False))
        return _Slot(raw=_encode(text[:comma].strip()), complete=True), recovered
    return slot, []


def _comma_offsets(text: str) -> Iterator[int]:
    in_string = False
    escaped = False
    for offset, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == ",":
            yield offset


def _decode_run(text: str, offset: int) -> tuple[list[str], str]:
    """Decode consecutive separated values, returning them and the undecoded rest."""
    pieces: list[str] = []
    while True:
        start = _skip_whitespace(text, offset)
        try:
            _, end = _DECODER.raw_decode(text, start)
        except ValueError:
            return pieces, text[start:].strip()
        offset = _skip_whitespace(text, end)
        separator = text[offset : offset + 1]
        if separator not in (",", "]"):
            return pieces, text[start:].strip()
        pieces.append(text[start:end])
        if separator == "]":
            return pieces, ""
        offset += 1


def _skip_whitespace(text: str, offset: int) -> int:
    match = _WHITESPACE.match(text, offset)
    return match.end() if match else offset


def _encode(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")
