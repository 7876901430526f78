from pydantic import BaseModel, ConfigDict, Field

from models.schemas.extracted_intent import ExtractedIntent
from models.schemas.taxonomy import RoleArchetype, SeniorityLevel


class ExtractionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intent: ExtractedIntent = ExtractedIntent()
    archetype: RoleArchetype | None = None
    seniority: SeniorityLevel | None = None
    processing_time_ms: int = Field(default=0, alias="processingTimeMs")
    fallback: bool | None = None


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
