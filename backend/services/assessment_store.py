"""Supabase data access for assessments, video assessments and dimension scores.

Tables read or written:
    assessments(id, user_id, scenario_id, report jsonb)
    video_assessments(id, assessment_id, status)
    dimension_scores(video_assessment_id, dimension, score, trainable_gap)
    users(id, name)

Every function takes the client explicitly so callers (and tests) decide
which connection is used.
"""

import logging
from typing import Any, Iterable

from supabase import Client, create_client

from config import settings
from models.schemas.taxonomy import AssessmentDimension
from services.errors import ConfigurationError, StoreError

logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"

# PostgREST puts filter values in the URL; keep in_() lists short
_IN_CHUNK_SIZE = 100


def get_client() -> Client:
    """Create a Supabase client from SUPABASE_URL + SUPABASE_KEY."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(settings.supabase_url, settings.supabase_key)


def _chunks(values: list[str], size: int = _IN_CHUNK_SIZE) -> Iterable[list[str]]:
    for i in range(0, len(values), size):
        yield values[i:i + size]


def _select_in(client: Client, table: str, columns: str, column: str, values: list[str]) -> list[dict]:
    rows: list[dict] = []
    for chunk in _chunks(values):
        rows.extend(
            client.table(table)
            .select(columns)
            .in_(column, chunk)
            .execute()
            .data
            or []
        )
    return rows


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

def scores_from_rows(rows: Iterable[dict]) -> dict[str, dict[AssessmentDimension, float]]:
    """Group dimension_scores rows into ``{video_assessment_id: {dimension: score}}``.

    Rows with an unknown dimension name or a null score are skipped.
    """
    grouped: dict[str, dict[AssessmentDimension, float]] = {}
    for row in rows:
        try:
            dimension = AssessmentDimension(row.get("dimension"))
        except ValueError:
            logger.debug("Skipping score with unknown dimension %r", row.get("dimension"))
            continue
        score = row.get("score")
        if score is None:
            continue
        grouped.setdefault(row["video_assessment_id"], {})[dimension] = float(score)
    return grouped


def get_completed_video_assessment(client: Client, assessment_id: str) -> dict | None:
    """Return the COMPLETED video assessment row for an assessment, if any."""
    rows = (
        client.table("video_assessments")
        .select("id, assessment_id, status")
        .eq("assessment_id", assessment_id)
        .eq("status", COMPLETED)
        .limit(1)
        .execute()
        .data
    )
    return rows[0] if rows else None


def _completed_video_assessments(client: Client) -> list[dict]:
    return (
        client.table("video_assessments")
        .select("id, assessment_id")
        .eq("status", COMPLETED)
        .execute()
        .data
        or []
    )


def get_completed_assessment_ids(client: Client) -> list[str]:
    """Assessment ids that have a COMPLETED video assessment, first-seen order."""
    seen: dict[str, None] = {}
    for row in _completed_video_assessments(client):
        seen.setdefault(row["assessment_id"], None)
    return list(seen)


def get_completed_population(client: Client) -> dict[str, dict[AssessmentDimension, float]]:
    """Scores of every assessment with a COMPLETED video assessment.

    Returns ``{assessment_id: {dimension: score}}``; assessments without
    any recorded score are left out.
    """
    videos = _completed_video_assessments(client)
    if not videos:
        return {}

    video_to_assessment = {row["id"]: row["assessment_id"] for row in videos}
    rows = _select_in(
        client,
        "dimension_scores",
        "video_assessment_id, dimension, score",
        "video_assessment_id",
        list(video_to_assessment),
    )

    population: dict[str, dict[AssessmentDimension, float]] = {}
    for video_id, scores in scores_from_rows(rows).items():
        assessment_id = video_to_assessment.get(video_id)
        if assessment_id is not None and scores:
            population[assessment_id] = scores
    return population


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def get_assessment_report(client: Client, assessment_id: str) -> tuple[bool, dict | None]:
    """Return ``(found, report)`` for an assessment.

    ``found`` is False when no assessment has this id; ``report`` is None
    when the assessment exists but has no report yet.
    """
    rows = (
        client.table("assessments")
        .select("id, report")
        .eq("id", assessment_id)
        .execute()
        .data
    )
    if not rows:
        return False, None
    report = rows[0].get("report")
    return True, report if isinstance(report, dict) else None


def update_assessment_report(client: Client, assessment_id: str, report: dict[str, Any]) -> None:
    """Overwrite the report column of one assessment.

    Raises:
        StoreError: If the Supabase client reports an error.
    """
    result = (
        client.table("assessments")
        .update({"report": report})
        .eq("id", assessment_id)
        .execute()
    )
    if getattr(result, "error", None):
        raise StoreError(f"Failed to update report for assessment id={assessment_id}: {result.error}")


# ---------------------------------------------------------------------------
# Comparison view
# ---------------------------------------------------------------------------

def get_assessments_for_comparison(client: Client, assessment_ids: list[str]) -> dict[str, dict]:
    """Load what the comparison view needs for each found assessment.

    Returns ``{assessment_id: {"id", "user_id", "candidate_name", "report",
    "video_status", "scores"}}`` where ``scores`` is a list of
    ``{"dimension", "score", "trainable_gap"}`` rows. Ids with no matching
    assessment are simply absent.
    """
    if not assessment_ids:
        return {}

    assessments = _select_in(client, "assessments", "id, user_id, report", "id", assessment_ids)
    if not assessments:
        return {}

    user_ids = sorted({a["user_id"] for a in assessments if a.get("user_id")})
    names = {
        u["id"]: u.get("name")
        for u in (_select_in(client, "users", "id, name", "id", user_ids) if user_ids else [])
    }

    videos = _select_in(
        client,
        "video_assessments",
        "id, assessment_id, status",
        "assessment_id",
        [a["id"] for a in assessments],
    )
    video_by_assessment = {v["assessment_id"]: v for v in videos}

    score_rows: dict[str, list[dict]] = {}
    if videos:
        for row in _select_in(
            client,
            "dimension_scores",
            "video_assessment_id, dimension, score, trainable_gap",
            "video_assessment_id",
            [v["id"] for v in videos],
        ):
            score_rows.setdefault(row["video_assessment_id"], []).append(row)

    loaded: dict[str, dict] = {}
    for assessment in assessments:
        video = video_by_assessment.get(assessment["id"])
        loaded[assessment["id"]] = {
            "id": assessment["id"],
            "user_id": assessment.get("user_id"),
            "candidate_name": names.get(assessment.get("user_id")),
            "report": assessment.get("report") if isinstance(assessment.get("report"), dict) else None,
            "video_status": video.get("status") if video else None,
            "scores": score_rows.get(video["id"], []) if video else [],
        }
    return loaded
