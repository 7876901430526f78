from unittest.mock import MagicMock, patch

import recalculate_percentiles
from models.schemas.percentile_result import PercentileResult
from services.errors import ConfigurationError


def _patched_service():
    service = MagicMock()
    return (
        patch.object(recalculate_percentiles.assessment_store, "get_client", return_value=MagicMock()),
        patch.object(recalculate_percentiles, "PercentileService", return_value=service),
        service,
    )


def test_bulk_run():
    client_patch, service_patch, service = _patched_service()
    service.recalculate_all_percentiles.return_value = 7
    with client_patch, service_patch:
        assert recalculate_percentiles.main([]) == 0
    service.recalculate_all_percentiles.assert_called_once_with()


def test_single_assessment():
    client_patch, service_patch, service = _patched_service()
    service.calculate_and_store_percentiles.return_value = PercentileResult(overall=80, total_candidates=5)
    with client_patch, service_patch:
        assert recalculate_percentiles.main(["--assessment-id", "a1"]) == 0
    service.calculate_and_store_percentiles.assert_called_once_with("a1")
    service.recalculate_all_percentiles.assert_not_called()


def test_single_assessment_without_scores_fails():
    client_patch, service_patch, service = _patched_service()
    service.calculate_and_store_percentiles.return_value = None
    with client_patch, service_patch:
        assert recalculate_percentiles.main(["--assessment-id", "a1"]) == 1


def test_missing_credentials_fails():
    with patch.object(
        recalculate_percentiles.assessment_store,
        "get_client",
        side_effect=ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set"),
    ):
        assert recalculate_percentiles.main([]) == 1
