"""Entity extractor output: structured intent parsed from a recruiter query."""

import math

from pydantic import BaseModel, ConfigDict, field_validator

from models.schemas.taxonomy import RoleArchetype, SeniorityLevel


class ExtractedIntent(BaseModel):
    """Structured entities from a natural-language search query.

    Validation is lenient: a field of the wrong type becomes None (scalars)
    or an empty list (list fields) instead of rejecting the whole object.
    """
    model_config = ConfigDict(frozen=True)

    job_title: str | None = None
    location: str | None = None
    years_experience: float | None = None
    skills: list[str] = []
    industry: list[str] = []
    company_type: list[str] = []

    @field_validator("job_title", "location", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    @field_validator("years_experience", mode="before")
    @classmethod
    def _coerce_years(cls, value):
        # bool is an int subclass; "true" years is never meaningful
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip().rstrip("+"))
            except ValueError:
                return None
        if not isinstance(value, (int, float)):
            return None
        try:
            value = float(value)
        except (OverflowError, ValueError):
            return None
        if math.isnan(value) or math.isinf(value) or value < 0:
            return None
        return value

    @field_validator("skills", "industry", "company_type", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        if not isinstance(value, list):
            return []
        items: list[str] = []
        seen: set[str] = set()
        for item in value:
            if not isinstance(item, str):
                continue
            item = item.strip()
            if item and item.lower() not in seen:
                items.append(item)
                seen.add(item.lower())
        return items

    def is_empty(self) -> bool:
        return (
            self.job_title is None
            and self.location is None
            and self.years_experience is None
            and not self.skills
            and not self.industry
            and not self.company_type
        )


class EntityExtractionResult(BaseModel):
    """Intent plus the archetype/seniority mapped from it."""
    intent: ExtractedIntent = ExtractedIntent()
    archetype: RoleArchetype | None = None
    seniority: SeniorityLevel | None = None
    success: bool = True
    processing_time_ms: int = 0
    error: str | None = None
