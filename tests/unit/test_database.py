"""
Unit tests for config.database helpers.

Run: pytest tests/unit/test_database.py -v
"""

from config.database import check_connection
from tests.factories import MappingFactory


class TestCheckConnection:

    def test_healthy_reports_active_count(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("mapping_history", [
            MappingFactory.row(),
            MappingFactory.row(is_deleted=True),
        ])

        result = check_connection()

        assert result == {"status": "healthy", "active_mappings": 1}

    def test_unhealthy_on_failure(self, mock_db, mock_supabase):
        mock_supabase.fail_with("mapping_history", RuntimeError("no route to host"))

        result = check_connection()

        assert result["status"] == "unhealthy"
        assert "no route to host" in result["error"]


class TestHealthEndpoint:

    def test_health_degraded_when_db_down(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.fail_with("mapping_history", RuntimeError("down"))

        response = test_client_with_mock_db.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
