"""
Tests for Dose Log Service
Tests the dose logging transaction, the write-time override and the streak
"""

import pytest
from datetime import datetime, date, timedelta

from sqlalchemy.orm import Session

from models import DoseLog, DoseStatus, User
from services.dose_log_service import (
    DoseLogService,
    LOGGED_MESSAGE,
    OVERRIDE_MESSAGE,
    bump_streak,
)
from services.exceptions import NotFoundError, ValidationFailure


NOW = datetime(2026, 3, 2, 12, 0, 0)


@pytest.fixture
def dose_log_service():
    """Create dose log service instance"""
    return DoseLogService()


# =============================================================================
# Log Dose Tests
# =============================================================================

@pytest.mark.database
class TestLogDose:
    """Tests for DoseLogService.log_dose"""

    @pytest.mark.asyncio
    async def test_on_time_dose(self, dose_log_service, db_session: Session, test_user, test_medication):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "11:50", now=NOW, db=db_session
        )

        log = result["dose_log"]
        assert result["message"] == LOGGED_MESSAGE
        assert result["overridden"] is False
        assert log.status == DoseStatus.TAKEN
        assert log.was_late is False
        assert log.taken_at == NOW
        assert log.created_at == NOW

    @pytest.mark.asyncio
    async def test_late_dose_is_flagged(self, dose_log_service, db_session: Session, test_user, test_medication):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "10:00", now=NOW, db=db_session
        )

        assert result["dose_log"].status == DoseStatus.TAKEN
        assert result["dose_log"].was_late is True

    @pytest.mark.asyncio
    async def test_taken_over_four_hours_late_becomes_missed(
        self, dose_log_service, db_session: Session, test_user, test_medication
    ):
        # 250 minutes after 07:50
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "07:50", now=NOW, db=db_session
        )

        stored = db_session.get(DoseLog, result["dose_log"].id)
        assert stored.status == DoseStatus.MISSED
        assert result["message"] == OVERRIDE_MESSAGE
        assert result["overridden"] is True
        assert result["user_streak"] == 0

    @pytest.mark.asyncio
    async def test_exactly_four_hours_is_not_overridden(
        self, dose_log_service, db_session: Session, test_user, test_medication
    ):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "08:00", now=NOW, db=db_session
        )

        assert result["dose_log"].status == DoseStatus.TAKEN
        assert result["dose_log"].was_late is False
        assert result["overridden"] is False

    @pytest.mark.asyncio
    async def test_skipped_is_never_overridden(self, dose_log_service, db_session: Session, test_user, test_medication):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "06:00", status="skipped", now=NOW, db=db_session
        )

        assert result["dose_log"].status == DoseStatus.SKIPPED
        assert result["message"] == LOGGED_MESSAGE

    @pytest.mark.asyncio
    async def test_invalid_time_rejected(self, dose_log_service, db_session: Session, test_user, test_medication):
        with pytest.raises(ValidationFailure):
            await dose_log_service.log_dose(
                test_user.id, test_medication.id, "8:00", now=NOW, db=db_session
            )
        assert db_session.query(DoseLog).count() == 0

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, dose_log_service, db_session: Session, test_user, test_medication):
        with pytest.raises(ValidationFailure):
            await dose_log_service.log_dose(
                test_user.id, test_medication.id, "08:00", status="pending", now=NOW, db=db_session
            )

    @pytest.mark.asyncio
    async def test_foreign_medication_rejected(
        self, dose_log_service, db_session: Session, other_user, test_medication
    ):
        with pytest.raises(NotFoundError):
            await dose_log_service.log_dose(
                other_user.id, test_medication.id, "08:00", now=NOW, db=db_session
            )
        assert db_session.query(DoseLog).count() == 0


# =============================================================================
# Streak Tests
# =============================================================================

@pytest.mark.database
class TestStreak:
    """Tests for the once-per-day streak increment"""

    @pytest.mark.asyncio
    async def test_two_taken_doses_increment_once(
        self, dose_log_service, db_session: Session, test_user, test_medication
    ):
        test_user.streak = 3
        test_user.last_streak_update = NOW - timedelta(days=1)
        db_session.commit()

        first = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "11:55", now=NOW, db=db_session
        )
        second = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "12:00", now=NOW + timedelta(minutes=5), db=db_session
        )

        assert first["user_streak"] == 4
        assert second["user_streak"] == 4
        db_session.refresh(test_user)
        assert test_user.streak == 4
        assert test_user.last_streak_update == NOW

    @pytest.mark.asyncio
    async def test_first_ever_taken_dose_starts_streak(
        self, dose_log_service, db_session: Session, test_user, test_medication
    ):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "12:00", now=NOW, db=db_session
        )
        assert result["user_streak"] == 1

    @pytest.mark.asyncio
    async def test_missed_dose_leaves_streak(
        self, dose_log_service, db_session: Session, test_user, test_medication
    ):
        result = await dose_log_service.log_dose(
            test_user.id, test_medication.id, "12:00", status="missed", now=NOW, db=db_session
        )
        assert result["user_streak"] == 0

    def test_bump_streak_is_conditional(self, db_session: Session, test_user):
        assert bump_streak(db_session, test_user.id, NOW) is True
        assert bump_streak(db_session, test_user.id, NOW + timedelta(hours=1)) is False
        assert bump_streak(db_session, test_user.id, NOW + timedelta(days=1)) is True
        db_session.commit()

        user = db_session.get(User, test_user.id)
        db_session.refresh(user)
        assert user.streak == 2


# =============================================================================
# Log History Tests
# =============================================================================

@pytest.mark.database
class TestGetDoseLogs:
    """Tests for DoseLogService.get_dose_logs"""

    @pytest.mark.asyncio
    async def test_newest_first(self, dose_log_service, db_session: Session, test_user, test_medication, make_log):
        older = make_log(test_medication, "08:00", NOW - timedelta(days=2))
        newer = make_log(test_medication, "08:00", NOW - timedelta(days=1))

        logs = await dose_log_service.get_dose_logs(test_user.id, db=db_session)

        assert [log.id for log in logs] == [newer.id, older.id]
        assert logs[0].medication.name == "Metformin"

    @pytest.mark.asyncio
    async def test_range_inclusive_whole_days(
        self, dose_log_service, db_session: Session, test_user, test_medication, make_log
    ):
        make_log(test_medication, "08:00", datetime(2026, 2, 27, 8, 0))
        late_evening = make_log(test_medication, "20:00", datetime(2026, 2, 28, 23, 59))
        make_log(test_medication, "08:00", datetime(2026, 3, 1, 0, 1))

        logs = await dose_log_service.get_dose_logs(
            test_user.id, date(2026, 2, 28), date(2026, 2, 28), db=db_session
        )

        assert [log.id for log in logs] == [late_evening.id]

    @pytest.mark.asyncio
    async def test_single_bound_is_ignored(
        self, dose_log_service, db_session: Session, test_user, test_medication, make_log
    ):
        make_log(test_medication, "08:00", datetime(2026, 2, 1, 8, 0))

        logs = await dose_log_service.get_dose_logs(
            test_user.id, start_date=date(2026, 3, 1), db=db_session
        )

        assert len(logs) == 1

    @pytest.mark.asyncio
    async def test_inverted_range_rejected(self, dose_log_service, db_session: Session, test_user):
        with pytest.raises(ValidationFailure):
            await dose_log_service.get_dose_logs(
                test_user.id, date(2026, 3, 2), date(2026, 3, 1), db=db_session
            )
