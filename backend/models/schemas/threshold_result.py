"""Seniority matcher inputs and outputs."""

from pydantic import BaseModel

from models.schemas.taxonomy import AssessmentDimension, RoleArchetype, SeniorityLevel


class CandidateScores(BaseModel):
    """A candidate's dimension scores (1-5), as fed to the seniority filter."""
    candidate_id: str
    dimension_scores: dict[AssessmentDimension, float] = {}


class ThresholdCheckResult(BaseModel):
    """Outcome of the conjunctive key-dimension gate for one candidate."""
    meets_threshold: bool
    archetype: RoleArchetype
    seniority: SeniorityLevel  # always a filtering level
    threshold: float
    key_dimensions: list[AssessmentDimension] = []
    failing_dimensions: list[AssessmentDimension] = []  # scored below threshold
    missing_dimensions: list[AssessmentDimension] = []  # no score recorded
    reasons: list[str] = []


class FilterResult(BaseModel):
    candidate_id: str
    passes: bool
    check: ThresholdCheckResult | None = None  # None when the filter was a pass-through
    reason: str = ""


class AlignmentReport(BaseModel):
    """Consistency report for the archetype -> key dimensions table."""
    valid: bool
    unknown_dimensions: dict[str, list[str]] = {}
    missing_archetypes: list[str] = []
    empty_archetypes: list[str] = []
