"""Side-by-side comparison of up to four candidates' assessments.

Only stored percentiles are read; nothing is recomputed here. Run the
percentile job first if the numbers look stale.
"""

import logging
from typing import Sequence

import numpy as np
from supabase import Client

from models.schemas.candidate_comparison import (
    CandidateComparison,
    DimensionScoreComparison,
    StrengthLevel,
)
from services import assessment_store
from services.errors import AssessmentNotFoundError
from services.percentile_calculator import percentiles_from_report

logger = logging.getLogger(__name__)

MAX_COMPARE = 4


def get_strength_level(overall_score: float) -> StrengthLevel:
    if overall_score >= 4.5:
        return "Exceptional"
    if overall_score >= 3.5:
        return "Strong"
    if overall_score >= 2.5:
        return "Proficient"
    return "Developing"


def find_top_strength(dimension_scores: Sequence[DimensionScoreComparison]) -> str | None:
    """Dimension with the highest percentile; the first one wins a tie."""
    top: DimensionScoreComparison | None = None
    for ds in dimension_scores:
        if top is None or ds.percentile > top.percentile:
            top = ds
    return top.dimension if top else None


def find_biggest_gap(
    dimension_scores: Sequence[DimensionScoreComparison],
    trainable_gaps: set[str],
) -> str | None:
    """Lowest-percentile dimension among those flagged as a trainable gap."""
    gap: DimensionScoreComparison | None = None
    for ds in dimension_scores:
        if ds.dimension not in trainable_gaps:
            continue
        if gap is None or ds.percentile < gap.percentile:
            gap = ds
    return gap.dimension if gap else None


def _build_comparison(assessment: dict, percentiles: dict[str, int] | None) -> CandidateComparison:
    percentiles = percentiles or {}
    dimension_scores: list[DimensionScoreComparison] = []
    trainable_gaps: set[str] = set()

    if assessment["video_status"] == assessment_store.COMPLETED:
        for row in assessment["scores"]:
            if row.get("score") is None:
                continue
            dimension = row["dimension"]
            dimension_scores.append(DimensionScoreComparison(
                dimension=dimension,
                score=float(row["score"]),
                percentile=percentiles.get(dimension, 0),
            ))
            if row.get("trainable_gap"):
                trainable_gaps.add(dimension)

    overall_score = float(np.mean([ds.score for ds in dimension_scores])) if dimension_scores else 0.0

    return CandidateComparison(
        candidate_id=assessment.get("user_id") or "",
        candidate_name=assessment.get("candidate_name"),
        assessment_id=assessment["id"],
        overall_score=overall_score,
        overall_percentile=percentiles.get("overall", 0),
        strength_level=get_strength_level(overall_score),
        dimension_scores=dimension_scores,
        top_strength=find_top_strength(dimension_scores),
        biggest_gap=find_biggest_gap(dimension_scores, trainable_gaps),
    )


def compare_candidates(client: Client, assessment_ids: Sequence[str]) -> list[CandidateComparison]:
    """Build comparison summaries, in the order the ids were given.

    Raises:
        AssessmentNotFoundError: if any id does not match an assessment.
    """
    loaded = assessment_store.get_assessments_for_comparison(client, list(assessment_ids))
    missing = [aid for aid in assessment_ids if aid not in loaded]
    if missing:
        raise AssessmentNotFoundError(missing)

    return [
        _build_comparison(loaded[aid], percentiles_from_report(loaded[aid]["report"]))
        for aid in assessment_ids
    ]
