"""Tests for services.assessment_store: Supabase queries and row shaping."""

from unittest.mock import MagicMock, patch

import pytest

from conftest import make_client, make_execute, make_table
from models.schemas.taxonomy import AssessmentDimension as D
from services import assessment_store
from services.errors import ConfigurationError, StoreError


class TestScoresFromRows:
    def test_groups_by_video_assessment(self):
        rows = [
            {"video_assessment_id": "v1", "dimension": "COMMUNICATION", "score": 4},
            {"video_assessment_id": "v1", "dimension": "LEADERSHIP", "score": 3.5},
            {"video_assessment_id": "v2", "dimension": "COMMUNICATION", "score": 2},
        ]
        grouped = assessment_store.scores_from_rows(rows)
        assert grouped == {
            "v1": {D.COMMUNICATION: 4.0, D.LEADERSHIP: 3.5},
            "v2": {D.COMMUNICATION: 2.0},
        }

    def test_skips_unknown_dimension_and_null_score(self):
        rows = [
            {"video_assessment_id": "v1", "dimension": "CHARISMA", "score": 5},
            {"video_assessment_id": "v1", "dimension": "CREATIVITY", "score": None},
            {"video_assessment_id": "v1", "dimension": "CREATIVITY", "score": 3},
        ]
        assert assessment_store.scores_from_rows(rows) == {"v1": {D.CREATIVITY: 3.0}}

    def test_empty(self):
        assert assessment_store.scores_from_rows([]) == {}


class TestGetClient:
    def test_requires_credentials(self):
        with patch.object(assessment_store.settings, "supabase_url", ""):
            with pytest.raises(ConfigurationError):
                assessment_store.get_client()

    def test_builds_client_from_settings(self):
        with patch.object(assessment_store.settings, "supabase_url", "https://x.supabase.co"), \
             patch.object(assessment_store.settings, "supabase_key", "key"), \
             patch.object(assessment_store, "create_client") as create:
            assessment_store.get_client()
        create.assert_called_once_with("https://x.supabase.co", "key")


class TestVideoAssessments:
    def test_completed_video_assessment_found(self):
        videos = make_table(make_execute([{"id": "v1", "assessment_id": "a1", "status": "COMPLETED"}]))
        client = make_client(video_assessments=videos)

        row = assessment_store.get_completed_video_assessment(client, "a1")

        assert row["id"] == "v1"
        videos.eq.assert_any_call("assessment_id", "a1")
        videos.eq.assert_any_call("status", "COMPLETED")

    def test_completed_video_assessment_missing(self):
        client = make_client(video_assessments=make_table(make_execute([])))
        assert assessment_store.get_completed_video_assessment(client, "a1") is None

    def test_completed_assessment_ids_deduplicated_in_order(self):
        rows = [
            {"id": "v1", "assessment_id": "a2"},
            {"id": "v2", "assessment_id": "a1"},
            {"id": "v3", "assessment_id": "a2"},
        ]
        client = make_client(video_assessments=make_table(make_execute(rows)))
        assert assessment_store.get_completed_assessment_ids(client) == ["a2", "a1"]


class TestCompletedPopulation:
    def test_maps_scores_to_assessments(self):
        videos = make_table(make_execute([
            {"id": "v1", "assessment_id": "a1"},
            {"id": "v2", "assessment_id": "a2"},
            {"id": "v3", "assessment_id": "a3"},
        ]))
        scores = make_table(make_execute([
            {"video_assessment_id": "v1", "dimension": "COMMUNICATION", "score": 4},
            {"video_assessment_id": "v2", "dimension": "COMMUNICATION", "score": 2},
        ]))
        client = make_client(video_assessments=videos, dimension_scores=scores)

        population = assessment_store.get_completed_population(client)

        # a3 has no scores and is left out
        assert population == {
            "a1": {D.COMMUNICATION: 4.0},
            "a2": {D.COMMUNICATION: 2.0},
        }
        scores.in_.assert_called_once_with("video_assessment_id", ["v1", "v2", "v3"])

    def test_no_completed_videos_skips_score_query(self):
        client = make_client(video_assessments=make_table(make_execute([])))
        assert assessment_store.get_completed_population(client) == {}

    def test_large_populations_are_chunked(self):
        videos = make_table(make_execute([
            {"id": f"v{i}", "assessment_id": f"a{i}"} for i in range(150)
        ]))
        scores = make_table(make_execute([]), make_execute([]))
        client = make_client(video_assessments=videos, dimension_scores=scores)

        assessment_store.get_completed_population(client)

        assert scores.in_.call_count == 2


class TestReports:
    def test_report_found(self):
        report = {"summary": "good"}
        client = make_client(assessments=make_table(make_execute([{"id": "a1", "report": report}])))
        assert assessment_store.get_assessment_report(client, "a1") == (True, report)

    def test_assessment_without_report(self):
        client = make_client(assessments=make_table(make_execute([{"id": "a1", "report": None}])))
        assert assessment_store.get_assessment_report(client, "a1") == (True, None)

    def test_assessment_missing(self):
        client = make_client(assessments=make_table(make_execute([])))
        assert assessment_store.get_assessment_report(client, "nope") == (False, None)

    def test_update_report_payload(self):
        table = make_table(make_execute([{"id": "a1"}]))
        client = make_client(assessments=table)

        assessment_store.update_assessment_report(client, "a1", {"percentiles": {"overall": 50}})

        table.update.assert_called_once_with({"report": {"percentiles": {"overall": 50}}})
        table.eq.assert_called_once_with("id", "a1")

    def test_update_report_raises_on_error(self):
        client = make_client(assessments=make_table(make_execute(error="permission denied")))
        with pytest.raises(StoreError, match="permission denied"):
            assessment_store.update_assessment_report(client, "a1", {})


class TestAssessmentsForComparison:
    def test_joins_users_videos_and_scores(self):
        client = make_client(
            assessments=make_table(make_execute([
                {"id": "a1", "user_id": "u1", "report": {"percentiles": {}}},
                {"id": "a2", "user_id": "u2", "report": None},
            ])),
            users=make_table(make_execute([{"id": "u1", "name": "Ada"}, {"id": "u2", "name": None}])),
            video_assessments=make_table(make_execute([
                {"id": "v1", "assessment_id": "a1", "status": "COMPLETED"},
            ])),
            dimension_scores=make_table(make_execute([
                {"video_assessment_id": "v1", "dimension": "COMMUNICATION", "score": 4, "trainable_gap": False},
            ])),
        )

        loaded = assessment_store.get_assessments_for_comparison(client, ["a1", "a2"])

        assert loaded["a1"]["candidate_name"] == "Ada"
        assert loaded["a1"]["video_status"] == "COMPLETED"
        assert len(loaded["a1"]["scores"]) == 1
        assert loaded["a2"]["video_status"] is None
        assert loaded["a2"]["scores"] == []
        assert loaded["a2"]["report"] is None

    def test_unknown_ids_absent(self):
        client = make_client(assessments=make_table(make_execute([])))
        assert assessment_store.get_assessments_for_comparison(client, ["x"]) == {}

    def test_no_ids(self):
        client = MagicMock()
        assert assessment_store.get_assessments_for_comparison(client, []) == {}
        client.table.assert_not_called()
