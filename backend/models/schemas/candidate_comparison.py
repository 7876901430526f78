"""Side-by-side candidate summary for the recruiter comparison view."""

from typing import Literal

from pydantic import BaseModel

StrengthLevel = Literal["Exceptional", "Strong", "Proficient", "Developing"]


class DimensionScoreComparison(BaseModel):
    dimension: str
    score: float
    percentile: int = 0


class CandidateComparison(BaseModel):
    candidate_id: str
    candidate_name: str | None = None
    assessment_id: str
    overall_score: float = 0.0  # mean of dimension scores, 1-5 scale
    overall_percentile: int = 0
    strength_level: StrengthLevel = "Developing"
    dimension_scores: list[DimensionScoreComparison] = []
    top_strength: str | None = None  # highest percentile dimension
    biggest_gap: str | None = None  # lowest percentile trainable-gap dimension
