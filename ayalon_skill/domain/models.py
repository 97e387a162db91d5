# ayalon_skill/domain/models.py
"""
Types flowing through the enrichment pipeline.

Extractor wire models normalize absent collections (``null``) to empty
lists on the way in, so the aggregation code only ever sees lists.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ---------------------------
# Input
# ---------------------------

class InputRecord(BaseModel):
    """One document submitted for enrichment. ``record_id`` is echoed back untouched."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    document: Optional[str] = None


# ---------------------------
# Entity extractor response
# ---------------------------

class LinkedConcept(BaseModel):
    model_config = ConfigDict(extra="ignore")

    concept_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("concept_id", "conceptId", "Concept_Id", "CONCEPT_ID"),
    )
    source: Optional[str] = Field(None, validation_alias=AliasChoices("source", "Source"))


class ExtractedEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # missing offsets read as 0
    start_offset: int = Field(
        0,
        validation_alias=AliasChoices("startPosition", "start_position", "StartPosition", "start_offset"),
    )
    end_offset: int = Field(
        0,
        validation_alias=AliasChoices("endPosition", "end_position", "EndPosition", "end_offset"),
    )
    entity_type: str = Field(
        "",
        validation_alias=AliasChoices("entityType", "entity_type", "EntityType"),
    )
    score: Optional[float] = Field(None, validation_alias=AliasChoices("score", "Score"))
    linked_concepts: List[LinkedConcept] = Field(
        default_factory=list,
        validation_alias=AliasChoices("linking", "Linking", "linked_concepts"),
    )

    @field_validator("entity_type", mode="before")
    @classmethod
    def blank_entity_type(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("linked_concepts", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ExtractedRelation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    relation_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("relationType", "relation_type", "RelationType"),
    )


class ExtractionResponse(BaseModel):
    """One element of the extractor's response array."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "Id"))
    text: Optional[str] = Field(None, validation_alias=AliasChoices("text", "Text"))
    entities: List[ExtractedEntity] = Field(
        default_factory=list,
        validation_alias=AliasChoices("entities", "Entities"),
    )
    relations: List[ExtractedRelation] = Field(
        default_factory=list,
        validation_alias=AliasChoices("relations", "Relations"),
    )

    @field_validator("entities", "relations", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ---------------------------
# Output
# ---------------------------

class EnrichmentResult(BaseModel):
    """Normalized summary of one document. Serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True)

    entity_types: List[str] = Field(default_factory=list, serialization_alias="entityTypes")
    concepts: List[str] = Field(default_factory=list)
    relations: List[str] = Field(default_factory=list)
    age: int = 0


class ErrorDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class RecordResult(BaseModel):
    """Per-record outcome: enriched data, or the errors that prevented it."""

    record_id: str
    data: Optional[EnrichmentResult] = None
    errors: List[ErrorDetail] = Field(default_factory=list)
    warnings: List[ErrorDetail] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, record_id: str, data: EnrichmentResult) -> "RecordResult":
        return cls(record_id=record_id, data=data)

    @classmethod
    def failure(cls, record_id: str, message: str) -> "RecordResult":
        return cls(record_id=record_id, errors=[ErrorDetail(message=message)])

    def to_output(self) -> dict:
        """Skill output shape: ``{recordId, data, errors, warnings}`` with ``null`` for empty parts."""
        return {
            "recordId": self.record_id,
            "data": self.data.model_dump(by_alias=True) if self.data is not None else None,
            "errors": [e.model_dump() for e in self.errors] or None,
            "warnings": [w.model_dump() for w in self.warnings] or None,
        }
