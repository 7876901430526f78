"""Tests for services.entity_extractor: mapping helpers and the Gemini path."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from models.schemas.taxonomy import RoleArchetype, SeniorityLevel
from services.entity_extractor import (
    EntityExtractor,
    get_archetype_display_name,
    get_seniority_year_breakpoints,
    get_supported_job_title_keywords,
    infer_seniority_from_years,
    is_within_target_time,
    map_job_title_to_archetype,
)


def _gemini(text=None, side_effect=None):
    """Fake genai.Client whose aio.models.generate_content returns *text*."""
    client = MagicMock()
    response = MagicMock()
    response.text = text
    client.aio.models.generate_content = AsyncMock(return_value=response, side_effect=side_effect)
    return client


class TestMapJobTitle:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Senior Backend Engineer", RoleArchetype.SENIOR_BACKEND_ENGINEER),
            ("Front-End Developer", RoleArchetype.SENIOR_FRONTEND_ENGINEER),
            ("full stack developer", RoleArchetype.FULLSTACK_ENGINEER),
            ("Engineering Manager", RoleArchetype.ENGINEERING_MANAGER),
            ("Staff Engineer", RoleArchetype.TECH_LEAD),
            ("SRE", RoleArchetype.DEVOPS_ENGINEER),
            ("Data Platform Engineer", RoleArchetype.DATA_ENGINEER),
            ("ML Engineer", RoleArchetype.GENERAL_SOFTWARE_ENGINEER),
            ("Python Developer", RoleArchetype.GENERAL_SOFTWARE_ENGINEER),
        ],
    )
    def test_known_titles(self, title, expected):
        assert map_job_title_to_archetype(title) == expected

    def test_deterministic(self):
        first = map_job_title_to_archetype("Senior Backend Engineer")
        assert all(map_job_title_to_archetype("Senior Backend Engineer") == first for _ in range(5))

    def test_unknown_and_empty(self):
        assert map_job_title_to_archetype("Juggler") is None
        assert map_job_title_to_archetype("") is None
        assert map_job_title_to_archetype(None) is None

    def test_first_listed_match_wins(self):
        # "data engineer" is listed before the generic "engineer" titles
        assert map_job_title_to_archetype("backend data engineer") == RoleArchetype.DATA_ENGINEER

    def test_keywords_listed(self):
        keywords = get_supported_job_title_keywords()
        assert "backend" in keywords
        assert "software engineer" in keywords


class TestInferSeniority:
    @pytest.mark.parametrize(
        "years, expected",
        [
            (0, SeniorityLevel.JUNIOR),
            (2, SeniorityLevel.JUNIOR),
            (2.5, SeniorityLevel.MID),
            (3, SeniorityLevel.MID),
            (5, SeniorityLevel.MID),
            (6, SeniorityLevel.SENIOR),
            (15, SeniorityLevel.SENIOR),
        ],
    )
    def test_breakpoints(self, years, expected):
        assert infer_seniority_from_years(years) == expected

    def test_unknown(self):
        assert infer_seniority_from_years(None) is None
        assert infer_seniority_from_years(-1) is None

    def test_breakpoints_exposed(self):
        assert get_seniority_year_breakpoints() == {"junior_max": 2, "mid_max": 5}


def test_archetype_display_name():
    assert get_archetype_display_name(RoleArchetype.DEVOPS_ENGINEER) == "DevOps Engineer"
    assert get_archetype_display_name(None) is None


def test_is_within_target_time():
    assert is_within_target_time(120)
    assert is_within_target_time(500)
    assert not is_within_target_time(501)


class TestExtractEntities:
    @pytest.mark.asyncio
    async def test_empty_query_skips_gemini(self):
        client = _gemini("{}")
        result = await EntityExtractor(client).extract_entities("   ")
        assert result.success
        assert result.intent.is_empty()
        assert result.archetype is None
        client.aio.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_parses_gemini_json(self):
        client = _gemini(
            '```json\n{"job_title": "Backend Engineer", "location": "Berlin", '
            '"years_experience": "5+", "skills": ["Go", "go", "Kafka"], '
            '"industry": [], "company_type": ["startup"]}\n```'
        )
        result = await EntityExtractor(client, model="test-model").extract_entities(
            "backend engineer in Berlin, 5+ years, Go and Kafka, startup"
        )

        assert result.success
        assert result.error is None
        assert result.intent.job_title == "Backend Engineer"
        assert result.intent.years_experience == 5
        assert result.intent.skills == ["Go", "Kafka"]
        assert result.archetype == RoleArchetype.SENIOR_BACKEND_ENGINEER
        assert result.seniority == SeniorityLevel.MID
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["contents"].endswith("backend engineer in Berlin, 5+ years, Go and Kafka, startup")

    @pytest.mark.asyncio
    async def test_wrong_types_are_coerced(self):
        client = _gemini('{"job_title": 42, "years_experience": true, "skills": "Python", "industry": [1, "fintech"]}')
        result = await EntityExtractor(client).extract_entities("something")
        assert result.success
        assert result.intent.job_title is None
        assert result.intent.years_experience is None
        assert result.intent.skills == []
        assert result.intent.industry == ["fintech"]

    @pytest.mark.asyncio
    async def test_no_client(self):
        result = await EntityExtractor(None).extract_entities("python dev")
        assert not result.success
        assert result.error == "Gemini client not configured"
        assert result.intent.is_empty()

    @pytest.mark.asyncio
    async def test_api_error(self):
        client = _gemini(side_effect=RuntimeError("quota exceeded"))
        result = await EntityExtractor(client).extract_entities("python dev")
        assert not result.success
        assert result.error == "quota exceeded"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        result = await EntityExtractor(_gemini("I am not JSON")).extract_entities("python dev")
        assert not result.success
        assert "Could not parse JSON" in result.error

    @pytest.mark.asyncio
    async def test_json_array_rejected(self):
        result = await EntityExtractor(_gemini('["Python"]')).extract_entities("python dev")
        assert not result.success

    @pytest.mark.asyncio
    async def test_empty_response(self):
        result = await EntityExtractor(_gemini("")).extract_entities("python dev")
        assert not result.success
        assert result.error == "No response from Gemini"

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        client = MagicMock()
        client.aio.models.generate_content = slow
        result = await EntityExtractor(client, timeout_s=0.01).extract_entities("python dev")

        assert not result.success
        assert result.error == "Gemini request timed out"
        assert result.processing_time_ms >= 0
