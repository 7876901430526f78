"""Percentile calculator output, stored under report["percentiles"]."""

from pydantic import BaseModel, ConfigDict, Field

from models.schemas.taxonomy import AssessmentDimension


class PercentileResult(BaseModel):
    """Inclusive percentile ranks (0-100) for one assessment.

    Serialised with camelCase keys (``by_alias=True``) because the stored
    report JSON is read by the recruiter dashboards.
    """
    model_config = ConfigDict(populate_by_name=True)

    dimensions: dict[AssessmentDimension, int] = {}
    overall: int = 0
    calculated_at: str = Field(default="", alias="calculatedAt")
    total_candidates: int = Field(default=0, alias="totalCandidates")

    def to_flat_map(self) -> dict[str, int]:
        """Flatten to ``{"COMMUNICATION": 75, ..., "overall": 70}``."""
        flat = {dim.value: pct for dim, pct in self.dimensions.items()}
        flat["overall"] = self.overall
        return flat
