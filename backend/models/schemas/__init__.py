"""Pydantic contracts for the candidate matching pipeline."""

from models.schemas.taxonomy import (
    AssessmentDimension,
    RoleArchetype,
    SeniorityLevel,
    coarsen_seniority,
)
from models.schemas.extracted_intent import EntityExtractionResult, ExtractedIntent
from models.schemas.threshold_result import (
    AlignmentReport,
    CandidateScores,
    FilterResult,
    ThresholdCheckResult,
)
from models.schemas.percentile_result import PercentileResult
from models.schemas.candidate_comparison import CandidateComparison, DimensionScoreComparison

__all__ = [
    "AssessmentDimension",
    "RoleArchetype",
    "SeniorityLevel",
    "coarsen_seniority",
    "EntityExtractionResult",
    "ExtractedIntent",
    "AlignmentReport",
    "CandidateScores",
    "FilterResult",
    "ThresholdCheckResult",
    "PercentileResult",
    "CandidateComparison",
    "DimensionScoreComparison",
]
