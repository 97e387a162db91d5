# ayalon_skill/exceptions.py
"""
Exceptions shared across the skill.

- ConfigError         : settings / YAML config problems
- MalformedBatchError : the incoming batch itself is unusable (whole request fails)
- RecordDataError     : one record has no document text (that record fails)
- InvalidSpanError    : an entity span falls outside the document text
- ExtractionError     : entity extraction call failed or returned garbage
- AgeResolutionError  : age lookup failed (never leaves AgeResolver)
"""


class ConfigError(RuntimeError):
    """Settings (.env, YAML overrides) problem."""
    pass


class MalformedBatchError(ValueError):
    """Request body is not a batch, or has no values array."""
    pass


class InvalidSpanError(ValueError):
    """Character span is out of bounds for the document text."""
    pass


class ExtractionError(RuntimeError):
    """Entity extraction call, status, or payload parsing failure."""
    pass


class AgeResolutionError(RuntimeError):
    """Age lookup failure. Degraded to age 0 by AgeResolver."""
    pass


class RecordDataError(ValueError):
    """A single record is missing the data needed to enrich it."""
    pass
