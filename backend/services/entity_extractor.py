"""Entity extraction: recruiter search query -> structured intent.

Primary path sends the query to Gemini with a JSON-only prompt and validates
the reply into an ExtractedIntent. Any failure (API error, timeout, empty or
malformed reply) is reported as ``success=False``; the HTTP layer then falls
back to services.fallback_extractor, so callers never see an exception.
"""

import asyncio
import logging
import time

from google import genai

from config import settings
from models.schemas.extracted_intent import EntityExtractionResult, ExtractedIntent
from models.schemas.taxonomy import ARCHETYPE_DISPLAY_NAMES, RoleArchetype, SeniorityLevel
from services import gemini_client, prompt_builder

logger = logging.getLogger(__name__)

# Checked in order, first match wins. More specific patterns come first so
# that e.g. "data platform engineer" is not caught by "platform engineer".
JOB_TITLE_ARCHETYPE_MAP: list[tuple[tuple[str, ...], RoleArchetype]] = [
    (("data engineer", "data platform", "analytics engineer", "etl"),
     RoleArchetype.DATA_ENGINEER),
    (("frontend", "front-end", "front end", "ui engineer", "ui developer"),
     RoleArchetype.SENIOR_FRONTEND_ENGINEER),
    (("backend", "back-end", "back end", "server engineer", "api engineer"),
     RoleArchetype.SENIOR_BACKEND_ENGINEER),
    (("fullstack", "full-stack", "full stack"),
     RoleArchetype.FULLSTACK_ENGINEER),
    (("engineering manager", "eng manager", "em ", "manager of engineering"),
     RoleArchetype.ENGINEERING_MANAGER),
    (("tech lead", "technical lead", "lead engineer", "staff engineer",
      "principal engineer", "architect"),
     RoleArchetype.TECH_LEAD),
    (("devops", "sre", "site reliability", "infrastructure engineer", "platform engineer"),
     RoleArchetype.DEVOPS_ENGINEER),
    # AI/ML roles share the general software engineer thresholds
    (("ml engineer", "machine learning", "ai engineer", "ai/ml"),
     RoleArchetype.GENERAL_SOFTWARE_ENGINEER),
    (("software engineer", "software developer", "swe", "developer"),
     RoleArchetype.GENERAL_SOFTWARE_ENGINEER),
]

# Years of experience breakpoints (inclusive upper bounds)
JUNIOR_MAX_YEARS = 2
MID_MAX_YEARS = 5

TARGET_RESPONSE_MS = 500


def map_job_title_to_archetype(job_title: str | None) -> RoleArchetype | None:
    """Map a job title to a role archetype by case-insensitive keyword match."""
    if not job_title:
        return None

    normalized = job_title.lower().strip()
    for keywords, archetype in JOB_TITLE_ARCHETYPE_MAP:
        for keyword in keywords:
            if keyword in normalized:
                return archetype
    return None


def infer_seniority_from_years(years_experience: float | None) -> SeniorityLevel | None:
    """Classify years of experience: 0-2 junior, 3-5 mid, 6+ senior.

    Unknown (None) or negative input yields None rather than a default level.
    """
    if years_experience is None or years_experience < 0:
        return None
    if years_experience <= JUNIOR_MAX_YEARS:
        return SeniorityLevel.JUNIOR
    if years_experience <= MID_MAX_YEARS:
        return SeniorityLevel.MID
    return SeniorityLevel.SENIOR


def get_supported_job_title_keywords() -> list[str]:
    return [kw for keywords, _ in JOB_TITLE_ARCHETYPE_MAP for kw in keywords]


def get_seniority_year_breakpoints() -> dict[str, int]:
    return {"junior_max": JUNIOR_MAX_YEARS, "mid_max": MID_MAX_YEARS}


def get_archetype_display_name(archetype: RoleArchetype | None) -> str | None:
    if archetype is None:
        return None
    return ARCHETYPE_DISPLAY_NAMES.get(archetype, archetype.value)


def is_within_target_time(processing_time_ms: int) -> bool:
    """Whether an extraction was fast enough for live search-as-you-type."""
    return processing_time_ms <= TARGET_RESPONSE_MS


class EntityExtractor:
    """Gemini-backed query parser.

    The client is injected so tests can pass a double; ``client=None`` means
    Gemini is not configured and every non-empty query reports failure.
    """

    def __init__(
        self,
        client: genai.Client | None,
        model: str | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self._client = client
        self._model = model or settings.gemini_model
        self._timeout_s = timeout_s if timeout_s is not None else settings.extraction_timeout_s

    async def extract_entities(self, query: str) -> EntityExtractionResult:
        start = time.perf_counter()

        if not query or not query.strip():
            return EntityExtractionResult(success=True, processing_time_ms=_elapsed_ms(start))

        if self._client is None:
            return _error_result("Gemini client not configured", start)

        try:
            text = await gemini_client.generate_text(
                self._client,
                prompt_builder.build_entity_extraction_prompt(query),
                model=self._model,
                timeout_s=self._timeout_s,
                temperature=0.0,
                max_output_tokens=256,
            )
            data = gemini_client.parse_json(text)
            if not isinstance(data, dict):
                raise ValueError("Expected a JSON object from Gemini")
            intent = ExtractedIntent.model_validate(data)
        except asyncio.TimeoutError:
            logger.warning("Entity extraction timed out after %.1fs", self._timeout_s)
            return _error_result("Gemini request timed out", start)
        except Exception as e:
            logger.warning("Entity extraction failed: %s", e)
            return _error_result(str(e) or type(e).__name__, start)

        return EntityExtractionResult(
            intent=intent,
            archetype=map_job_title_to_archetype(intent.job_title),
            seniority=infer_seniority_from_years(intent.years_experience),
            success=True,
            processing_time_ms=_elapsed_ms(start),
        )


def _elapsed_ms(start: float) -> int:
    return int(round((time.perf_counter() - start) * 1000))


def _error_result(message: str, start: float) -> EntityExtractionResult:
    return EntityExtractionResult(
        success=False,
        processing_time_ms=_elapsed_ms(start),
        error=message,
    )
