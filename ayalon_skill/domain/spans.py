# ayalon_skill/domain/spans.py
from __future__ import annotations

from ayalon_skill.exceptions import InvalidSpanError


def extract_span(text: str, start: int, end: int) -> str:
    """Return ``text[start:end]`` for a half-open character span.

    Offsets outside the text are rejected, never clipped.

    Raises
    ------
    InvalidSpanError
        when ``start < 0``, ``end < start`` or ``end > len(text)``.
    """
    if text is None:
        raise InvalidSpanError("Cannot extract a span from missing document text.")
    if start < 0 or end < start or end > len(text):
        raise InvalidSpanError(
            f"Span [{start}, {end}) is out of bounds for text of length {len(text)}."
        )
    return text[start:end]
