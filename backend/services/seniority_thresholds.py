"""Seniority gate: does a candidate's video assessment support a seniority level?

Each archetype designates a few key dimensions that are diagnostic for
seniority. A candidate meets a level only if EVERY key dimension scores at or
above the level's minimum; a single weak or missing key dimension fails the
check regardless of how strong the others are.
"""

import logging
from typing import Iterable, Mapping

from models.schemas.taxonomy import (
    FILTER_SENIORITY_LEVELS,
    AssessmentDimension,
    RoleArchetype,
    SeniorityLevel,
    coarsen_seniority,
)
from models.schemas.threshold_result import (
    AlignmentReport,
    CandidateScores,
    FilterResult,
    ThresholdCheckResult,
)

logger = logging.getLogger(__name__)

D = AssessmentDimension

ARCHETYPE_KEY_DIMENSIONS: dict[RoleArchetype, tuple[AssessmentDimension, ...]] = {
    RoleArchetype.SENIOR_FRONTEND_ENGINEER: (D.TECHNICAL_KNOWLEDGE, D.CREATIVITY, D.COMMUNICATION),
    RoleArchetype.SENIOR_BACKEND_ENGINEER: (D.TECHNICAL_KNOWLEDGE, D.PROBLEM_SOLVING),
    RoleArchetype.FULLSTACK_ENGINEER: (D.TECHNICAL_KNOWLEDGE, D.PROBLEM_SOLVING, D.ADAPTABILITY),
    RoleArchetype.ENGINEERING_MANAGER: (D.LEADERSHIP, D.COMMUNICATION, D.COLLABORATION),
    RoleArchetype.TECH_LEAD: (D.LEADERSHIP, D.TECHNICAL_KNOWLEDGE, D.PROBLEM_SOLVING),
    RoleArchetype.DEVOPS_ENGINEER: (D.TECHNICAL_KNOWLEDGE, D.PROBLEM_SOLVING, D.TIME_MANAGEMENT),
    RoleArchetype.DATA_ENGINEER: (D.TECHNICAL_KNOWLEDGE, D.PROBLEM_SOLVING),
    RoleArchetype.GENERAL_SOFTWARE_ENGINEER: (D.PROBLEM_SOLVING, D.TECHNICAL_KNOWLEDGE, D.COMMUNICATION),
}

# Minimum score (1-5 scale) required on every key dimension
SENIORITY_THRESHOLDS: dict[SeniorityLevel, float] = {
    SeniorityLevel.JUNIOR: 2.0,
    SeniorityLevel.MID: 3.0,
    SeniorityLevel.SENIOR: 4.0,
}

_SENIORITY_DISPLAY_NAMES: dict[SeniorityLevel, str] = {
    SeniorityLevel.JUNIOR: "Junior (0-2 yrs)",
    SeniorityLevel.MID: "Mid-level (3-5 yrs)",
    SeniorityLevel.SENIOR: "Senior (6+ yrs)",
    SeniorityLevel.LEAD: "Lead",
    SeniorityLevel.PRINCIPAL: "Principal",
}


def get_key_dimensions_for_archetype(archetype: RoleArchetype) -> list[AssessmentDimension]:
    return list(ARCHETYPE_KEY_DIMENSIONS.get(RoleArchetype(archetype), ()))


def meets_threshold(
    dimension_scores: Mapping[AssessmentDimension, float],
    archetype: RoleArchetype,
    seniority: SeniorityLevel,
) -> ThresholdCheckResult:
    """Check every key dimension of *archetype* against the *seniority* minimum."""
    archetype = RoleArchetype(archetype)
    level = coarsen_seniority(seniority)
    threshold = SENIORITY_THRESHOLDS[level]
    key_dimensions = get_key_dimensions_for_archetype(archetype)
    scores = {AssessmentDimension(dim): score for dim, score in dimension_scores.items()}

    failing: list[AssessmentDimension] = []
    missing: list[AssessmentDimension] = []
    reasons: list[str] = []
    for dim in key_dimensions:
        score = scores.get(dim)
        if score is None:
            missing.append(dim)
            reasons.append(f"{dim.value} has no score (requires {threshold:g})")
        elif score < threshold:
            failing.append(dim)
            reasons.append(f"{dim.value} scored {score:g}, below {threshold:g}")

    return ThresholdCheckResult(
        meets_threshold=not failing and not missing,
        archetype=archetype,
        seniority=level,
        threshold=threshold,
        key_dimensions=key_dimensions,
        failing_dimensions=failing,
        missing_dimensions=missing,
        reasons=reasons,
    )


def filter_candidates_by_seniority(
    candidates: Iterable[CandidateScores],
    archetype: RoleArchetype | None,
    seniority: SeniorityLevel | None,
) -> list[FilterResult]:
    """Gate each candidate; one FilterResult per candidate, input order kept.

    Without both an archetype and a seniority there is not enough
    information to disqualify anyone, so every candidate passes.
    """
    if archetype is None or seniority is None:
        return [
            FilterResult(
                candidate_id=c.candidate_id,
                passes=True,
                reason="No archetype or seniority to filter on",
            )
            for c in candidates
        ]

    results: list[FilterResult] = []
    for candidate in candidates:
        check = meets_threshold(candidate.dimension_scores, archetype, seniority)
        results.append(FilterResult(
            candidate_id=candidate.candidate_id,
            passes=check.meets_threshold,
            check=check,
            reason="Meets all key dimension thresholds" if check.meets_threshold else "; ".join(check.reasons),
        ))
    return results


def passing_candidate_ids(results: Iterable[FilterResult]) -> list[str]:
    return [r.candidate_id for r in results if r.passes]


def verify_key_dimensions_alignment(
    key_dimensions: Mapping[str, Iterable[str]] | None = None,
) -> AlignmentReport:
    """Check that the key-dimension table only references real dimensions.

    Also reports archetypes missing from the table or mapped to no dimensions.
    Meant for startup and tests, not per request.
    """
    table = ARCHETYPE_KEY_DIMENSIONS if key_dimensions is None else key_dimensions
    known_dimensions = {d.value for d in AssessmentDimension}
    known_archetypes = {a.value for a in RoleArchetype}

    unknown: dict[str, list[str]] = {}
    empty: list[str] = []
    seen: set[str] = set()
    for archetype, dims in table.items():
        name = getattr(archetype, "value", archetype)
        seen.add(name)
        dim_names = [getattr(d, "value", d) for d in dims]
        if not dim_names:
            empty.append(name)
        bad = [d for d in dim_names if d not in known_dimensions]
        if name not in known_archetypes:
            bad = bad or dim_names
        if bad:
            unknown[name] = bad

    missing = sorted(known_archetypes - seen)
    report = AlignmentReport(
        valid=not unknown and not missing and not empty,
        unknown_dimensions=unknown,
        missing_archetypes=missing,
        empty_archetypes=empty,
    )
    if not report.valid:
        logger.error("Key dimension table misaligned: %s", report.model_dump())
    return report


def get_seniority_display_name(level: SeniorityLevel) -> str:
    return _SENIORITY_DISPLAY_NAMES[SeniorityLevel(level)]


def get_all_seniority_levels() -> list[SeniorityLevel]:
    """The three levels candidates can be filtered by, lowest first."""
    return list(FILTER_SENIORITY_LEVELS)
