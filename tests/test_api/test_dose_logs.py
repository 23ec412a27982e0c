"""
Tests for Dose Logs API
=======================

Tests dose logging, schedules, statistics and export over HTTP with a pinned clock.
"""

import pytest
from datetime import datetime
from fastapi import status
from fastapi.testclient import TestClient

from models import DoseStatus


# ==================== LOGGING TESTS ====================

class TestLogDoseApi:
    """Tests for POST /dose-logs"""

    @pytest.mark.api
    def test_log_taken(self, client: TestClient, auth_headers, test_medication):
        response = client.post(
            "/api/v1/dose-logs/",
            json={"medication_id": test_medication.id, "scheduled_time": "11:45"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Dose logged successfully"
        assert data["dose_log"]["status"] == "taken"
        assert data["dose_log"]["was_late"] is False
        assert data["user_streak"] == 1

    @pytest.mark.api
    def test_log_over_cutoff_is_missed(self, client: TestClient, auth_headers, test_medication):
        response = client.post(
            "/api/v1/dose-logs/",
            json={"medication_id": test_medication.id, "scheduled_time": "07:00", "status": "taken"},
            headers=auth_headers
        )

        data = response.json()
        assert response.status_code == status.HTTP_201_CREATED
        assert data["dose_log"]["status"] == "missed"
        assert data["message"] == (
            "Dose marked as missed because it was more than 4 hours after scheduled time"
        )
        assert data["user_streak"] == 0

    @pytest.mark.api
    def test_bad_time_rejected(self, client: TestClient, auth_headers, test_medication):
        response = client.post(
            "/api/v1/dose-logs/",
            json={"medication_id": test_medication.id, "scheduled_time": "25:00"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_bad_status_rejected(self, client: TestClient, auth_headers, test_medication):
        response = client.post(
            "/api/v1/dose-logs/",
            json={"medication_id": test_medication.id, "scheduled_time": "08:00", "status": "pending"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_unknown_medication(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/dose-logs/",
            json={"medication_id": 999, "scheduled_time": "08:00"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_list_logs(self, client: TestClient, auth_headers, test_medication, make_log):
        make_log(test_medication, "08:00", datetime(2026, 3, 1, 8, 0))

        response = client.get("/api/v1/dose-logs/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0]["medication"]["category"]["name"] == "Diabetes"

    @pytest.mark.api
    def test_list_logs_inverted_range(self, client: TestClient, auth_headers):
        response = client.get(
            "/api/v1/dose-logs/",
            params={"start_date": "2026-03-02", "end_date": "2026-03-01"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] is True


# ==================== SCHEDULE TESTS ====================

class TestScheduleApi:
    """Tests for schedule views"""

    @pytest.mark.api
    def test_todays_schedule(self, client: TestClient, auth_headers, test_medication, make_log):
        make_log(test_medication, "08:00", datetime(2026, 3, 2, 8, 1), DoseStatus.TAKEN)

        response = client.get("/api/v1/dose-logs/schedule", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [(e["scheduled_time"], e["status"]) for e in data] == [
            ("08:00", "taken"),
            ("20:00", "pending"),
        ]
        assert "date" not in data[0]
        assert data[0]["medication"]["name"] == "Metformin"

    @pytest.mark.api
    def test_weekly_schedule(self, client: TestClient, auth_headers, test_medication):
        response = client.get(
            "/api/v1/dose-logs/weekly-schedule",
            params={"start_date": "2026-03-01", "end_date": "2026-03-02"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [(e["date"], e["scheduled_time"], e["status"]) for e in data] == [
            ("2026-03-01", "08:00", "missed"),
            ("2026-03-01", "20:00", "missed"),
            ("2026-03-02", "08:00", "pending"),
            ("2026-03-02", "20:00", "pending"),
        ]

    @pytest.mark.api
    def test_weekly_schedule_requires_bounds(self, client: TestClient, auth_headers):
        response = client.get(
            "/api/v1/dose-logs/weekly-schedule",
            params={"start_date": "2026-03-01"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Start date and end date are required"


# ==================== STATS AND EXPORT TESTS ====================

class TestStatsApi:
    """Tests for statistics and export"""

    @pytest.mark.api
    def test_stats(self, client: TestClient, auth_headers, test_medication, make_log):
        make_log(test_medication, "08:00", datetime(2026, 3, 1, 8, 0), DoseStatus.TAKEN)

        response = client.get(
            "/api/v1/dose-logs/stats",
            params={"start_date": "2026-03-01", "end_date": "2026-03-01"},
            headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert data["taken"] == 1
        assert data["missed"] == 1
        assert data["overall"] == pytest.approx(0.5)
        assert data["by_medication"][0]["medication_name"] == "Metformin"
        assert data["by_day"] == [{
            "date": "2026-03-01",
            "total": 2,
            "taken": 1,
            "missed": 1,
            "skipped": 0,
            "adherence_rate": 0.5,
        }]

    @pytest.mark.api
    def test_export(self, client: TestClient, auth_headers, test_medication, make_log):
        make_log(test_medication, "20:00", datetime(2026, 3, 1, 20, 45), DoseStatus.TAKEN, was_late=True)

        response = client.get("/api/v1/dose-logs/export", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["time_taken"] == "20:45:00"
        assert rows[0]["category"] == "Diabetes"
        assert rows[0]["was_late"] == "Yes"
