"""Percentile ranks of a candidate's assessment against all completed assessments.

A percentile here is inclusive: the share of the population scoring at or
below the target, so the top scorer is always at 100 and a population of one
puts its only member at 100.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Mapping, Sequence

import numpy as np
from supabase import Client

from models.schemas.percentile_result import PercentileResult
from models.schemas.taxonomy import AssessmentDimension
from services import assessment_store

logger = logging.getLogger(__name__)

# Rank reported for a dimension the target was never scored on
NEUTRAL_PERCENTILE = 50

ScoreMap = Mapping[AssessmentDimension, float]


def _percentile_rank(value: float, population: Sequence[float]) -> int:
    """Inclusive percentile rank, rounded half up and clamped to [0, 100]."""
    values = np.asarray(population, dtype=float)
    if values.size == 0:
        return NEUTRAL_PERCENTILE
    at_or_below = int(np.count_nonzero(values <= value))
    pct = math.floor(at_or_below * 100 / values.size + 0.5)
    return max(0, min(100, pct))


def _mean_score(scores: ScoreMap) -> float | None:
    if not scores:
        return None
    return float(np.mean(list(scores.values())))


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def calculate_percentiles(
    target_scores: ScoreMap,
    population_scores: Sequence[ScoreMap],
    calculated_at: str | None = None,
) -> PercentileResult | None:
    """Rank *target_scores* against *population_scores*.

    The population should include the target itself. Returns None when
    either side is empty; there is nothing meaningful to rank.
    """
    if not target_scores or not population_scores:
        return None

    dimensions: dict[AssessmentDimension, int] = {}
    for dim in AssessmentDimension:
        if dim not in target_scores:
            dimensions[dim] = NEUTRAL_PERCENTILE
            continue
        column = [scores[dim] for scores in population_scores if dim in scores]
        dimensions[dim] = _percentile_rank(target_scores[dim], column)

    means = [m for m in (_mean_score(s) for s in population_scores) if m is not None]
    overall = _percentile_rank(_mean_score(target_scores), means)

    return PercentileResult(
        dimensions=dimensions,
        overall=overall,
        calculated_at=calculated_at or _utc_now_iso(),
        total_candidates=len(population_scores),
    )


def get_percentile_description(percentile: int) -> str:
    if percentile >= 90:
        return "Top 10%"
    if percentile >= 75:
        return "Top 25%"
    if percentile >= 50:
        return "Above average"
    if percentile >= 25:
        return "Below average"
    return "Bottom 25%"


def percentiles_from_report(report: dict | None) -> dict[str, int] | None:
    """Flatten ``report["percentiles"]``, or None when absent or malformed."""
    if not report:
        return None
    stored = report.get("percentiles")
    if not isinstance(stored, dict):
        return None
    try:
        return PercentileResult.model_validate(stored).to_flat_map()
    except ValueError:
        logger.warning("Malformed stored percentiles: %s", stored)
        return None


def _same_ranks(stored: dict | None, result: PercentileResult) -> bool:
    """Whether a stored percentiles blob already holds *result* (timestamp aside)."""
    if not isinstance(stored, dict):
        return False
    fresh = result.model_dump(mode="json", by_alias=True)
    return (
        stored.get("dimensions") == fresh["dimensions"]
        and stored.get("overall") == fresh["overall"]
        and stored.get("totalCandidates") == fresh["totalCandidates"]
    )


class PercentileService:
    """Computes percentiles and persists them into ``assessments.report``."""

    def __init__(self, client: Client):
        self._client = client

    def calculate_and_store_percentiles(self, assessment_id: str) -> PercentileResult | None:
        """Compute and store percentiles for one assessment.

        Returns None when the assessment has no completed video assessment
        or no scores.
        """
        if assessment_store.get_completed_video_assessment(self._client, assessment_id) is None:
            logger.info("No completed video assessment for %s, skipping percentiles", assessment_id)
            return None
        population = assessment_store.get_completed_population(self._client)
        return self._store(assessment_id, population)

    def _store(
        self,
        assessment_id: str,
        population: dict[str, dict[AssessmentDimension, float]],
    ) -> PercentileResult | None:
        target = population.get(assessment_id)
        if not target:
            logger.info("Assessment %s has no dimension scores, skipping percentiles", assessment_id)
            return None

        result = calculate_percentiles(target, list(population.values()))
        if result is None:
            return None

        found, report = assessment_store.get_assessment_report(self._client, assessment_id)
        if not found:
            logger.warning("Assessment %s not found, percentiles not stored", assessment_id)
            return None

        report = dict(report) if report else {}
        stored = report.get("percentiles")
        if _same_ranks(stored, result):
            logger.debug("Percentiles for %s unchanged, skipping write", assessment_id)
            return PercentileResult.model_validate(stored)

        report["percentiles"] = result.model_dump(mode="json", by_alias=True)
        assessment_store.update_assessment_report(self._client, assessment_id, report)
        return result

    def get_stored_percentiles(self, assessment_id: str) -> dict[str, int] | None:
        """Read the stored percentiles as a flat ``{dimension: pct, "overall": pct}`` map.

        This is ``PercentileResult.to_flat_map()`` of the stored result, not
        the model; ``calculatedAt`` and ``totalCandidates`` are dropped.
        Returns None when the assessment, its report or the percentiles key
        is missing. Nothing is recomputed.
        """
        found, report = assessment_store.get_assessment_report(self._client, assessment_id)
        if not found:
            return None
        return percentiles_from_report(report)

    def recalculate_all_percentiles(self) -> int:
        """Recompute percentiles for every completed assessment.

        The population is loaded once and shared. Returns the number of
        assessments whose percentiles were stored (or already current).
        """
        population = assessment_store.get_completed_population(self._client)
        assessment_ids = assessment_store.get_completed_assessment_ids(self._client)
        logger.info("Recalculating percentiles for %d assessments", len(assessment_ids))

        updated = 0
        for assessment_id in assessment_ids:
            try:
                if self._store(assessment_id, population) is not None:
                    updated += 1
            except Exception:
                logger.exception("Failed to recalculate percentiles for %s", assessment_id)

        logger.info("Percentiles recalculated for %d/%d assessments", updated, len(assessment_ids))
        return updated
