"""
Tests for the distribution orchestrator: selection, cooldown, round claiming
and best-effort distribution records.

Run with: pytest backend/tests/test_distribution_service.py -v
"""
import logging
import sqlite3
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from marketplace.quote_match import (
    CooldownActiveError,
    ForbiddenError,
    NoEligibleVendorsError,
    NotFoundError,
    SchemaError,
    VendorFilters,
)
from backend.core.db import RoundConflict, base as db_base, list_distribution_records
from backend.core.db.distributions import ProjectRoundLock
from backend.core.distribution import distribute_project, get_cooldown_status
from backend.tests.factories import count_rows, create_project, create_round, create_vendor, utc


T0 = utc(2026, 10, 19, 9, 0)


@pytest.fixture
def vendor_pool(patch_db):
    create_vendor(patch_db, "v1", specialties=["도배", "페인트"], min_ticket=1_000_000, regions=["seoul-gangnam"])
    create_vendor(patch_db, "v2", verified=False, specialties=["도배"], regions=["seoul-gangnam"])
    create_vendor(patch_db, "v3", specialties=["타일"], min_ticket=10_000_000, regions=["seoul-mapo"])
    create_vendor(patch_db, "v4", specialties=["욕실", "타일"], min_ticket=2_000_000, regions=["seoul-mapo"])
    create_vendor(patch_db, "v5", specialties=["마루"], min_ticket=500_000, regions=["busan"])
    return patch_db


class TestDistributeProject:

    def test_selects_verified_vendors_under_budget(self, vendor_pool):
        pid = create_project(vendor_pool, budget=5_000_000)

        result = distribute_project(pid, now=T0)

        assert result["distributed_vendor_ids"] == ["v1", "v4", "v5"]
        assert result["cooldown_until"] == T0 + timedelta(minutes=30)
        assert result["round"] == 1
        assert result["warnings"] == []

    def test_writes_one_record_per_vendor(self, vendor_pool):
        pid = create_project(vendor_pool, budget=5_000_000)

        distribute_project(pid, now=T0)

        records = list_distribution_records(pid)
        assert sorted(r["vendor_id"] for r in records) == ["v1", "v4", "v5"]
        assert {r["round_no"] for r in records} == {1}
        assert {r["cooldown_until"] for r in records} == {(T0 + timedelta(minutes=30)).isoformat()}

    def test_max_vendors_truncates(self, vendor_pool):
        pid = create_project(vendor_pool, budget=5_000_000)

        result = distribute_project(pid, max_vendors=2, now=T0)

        assert result["distributed_vendor_ids"] == ["v1", "v4"]

    def test_explicit_min_ticket_overrides_budget(self, vendor_pool):
        pid = create_project(vendor_pool, budget=100_000)

        result = distribute_project(
            pid, filters=VendorFilters(min_ticket=Decimal("20000000")), now=T0
        )

        assert result["distributed_vendor_ids"] == ["v1", "v3", "v4", "v5"]

    def test_specialty_and_region_filters(self, vendor_pool):
        pid = create_project(vendor_pool, budget=50_000_000)

        result = distribute_project(
            pid, filters=VendorFilters(specialties={"타일"}, regions={"seoul-mapo"}), now=T0
        )

        assert result["distributed_vendor_ids"] == ["v3", "v4"]

    def test_invalid_max_vendors(self, vendor_pool):
        pid = create_project(vendor_pool)

        with pytest.raises(SchemaError):
            distribute_project(pid, max_vendors=6, now=T0)
        assert count_rows(vendor_pool, "distribution_rounds") == 0

    def test_missing_project(self, vendor_pool):
        with pytest.raises(NotFoundError):
            distribute_project("no-such-project", now=T0)

    def test_other_users_project_is_forbidden(self, vendor_pool):
        pid = create_project(vendor_pool, user_id="owner")

        with pytest.raises(ForbiddenError):
            distribute_project(pid, acting_user_id="someone-else", now=T0)

    def test_owner_may_distribute(self, vendor_pool):
        pid = create_project(vendor_pool, user_id="owner")

        result = distribute_project(pid, acting_user_id="owner", now=T0)

        assert result["round"] == 1

    def test_no_eligible_vendors_claims_nothing(self, vendor_pool):
        pid = create_project(vendor_pool, budget=100)

        with pytest.raises(NoEligibleVendorsError):
            distribute_project(pid, now=T0)

        assert count_rows(vendor_pool, "distribution_rounds") == 0
        assert count_rows(vendor_pool, "quote_distributions") == 0


class TestCooldown:

    def test_second_round_inside_window_is_blocked(self, vendor_pool):
        pid = create_project(vendor_pool)
        distribute_project(pid, now=T0)

        with pytest.raises(CooldownActiveError) as exc_info:
            distribute_project(pid, now=T0 + timedelta(minutes=29))

        assert exc_info.value.cooldown_until == T0 + timedelta(minutes=30)
        assert count_rows(vendor_pool, "distribution_rounds") == 1

    def test_round_allowed_once_window_ends(self, vendor_pool):
        pid = create_project(vendor_pool)
        distribute_project(pid, now=T0)

        result = distribute_project(pid, now=T0 + timedelta(minutes=30))

        assert result["round"] == 2
        assert result["cooldown_until"] == T0 + timedelta(minutes=60)

    def test_cooldown_checked_before_selection(self, vendor_pool):
        """A throttled project reports the cooldown even if no vendor would qualify."""
        pid = create_project(vendor_pool)
        distribute_project(pid, now=T0)

        with pytest.raises(CooldownActiveError):
            distribute_project(pid, filters=VendorFilters(specialties={"없는공종"}), now=T0 + timedelta(minutes=5))

    def test_cooldown_status(self, vendor_pool):
        pid = create_project(vendor_pool)
        create_round(vendor_pool, project_id=pid, distributed_at=T0)

        active = get_cooldown_status(pid, now=T0 + timedelta(minutes=10))
        expired = get_cooldown_status(pid, now=T0 + timedelta(minutes=31))

        assert active == {"active": True, "cooldown_until": T0 + timedelta(minutes=30), "round": 1}
        assert expired["active"] is False
        assert expired["cooldown_until"] is None

    def test_never_distributed_project_is_not_throttled(self, vendor_pool):
        pid = create_project(vendor_pool)

        assert get_cooldown_status(pid, now=T0) == {"active": False, "cooldown_until": None, "round": 0}


class TestRoundRace:

    def test_lost_claim_reports_winner_deadline(self, vendor_pool):
        """A writer that loses the round claim gets the winner's cooldown."""
        pid = create_project(vendor_pool)
        winner_at = T0 + timedelta(minutes=2)
        create_round(vendor_pool, project_id=pid, distributed_at=winner_at)

        with patch.object(ProjectRoundLock, "latest_round", return_value=None), \
             patch.object(ProjectRoundLock, "claim_round", side_effect=RoundConflict("round 1 taken")):
            with pytest.raises(CooldownActiveError) as exc_info:
                distribute_project(pid, now=T0)

        assert exc_info.value.cooldown_until == winner_at + timedelta(minutes=30)
        assert count_rows(vendor_pool, "quote_distributions") == 0

    def test_round_numbers_are_unique_per_project(self, vendor_pool):
        pid = create_project(vendor_pool)
        create_round(vendor_pool, project_id=pid, distributed_at=T0, round_no=1)

        with pytest.raises(sqlite3.IntegrityError):
            create_round(vendor_pool, project_id=pid, distributed_at=T0 + timedelta(hours=1), round_no=1)


class TestPartialPersistence:

    def test_record_failure_becomes_warning(self, vendor_pool, caplog):
        pid = create_project(vendor_pool)

        with patch(
            "backend.core.distribution.insert_distribution_records",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            with caplog.at_level(logging.WARNING, logger="backend.core.side_effects"):
                result = distribute_project(pid, now=T0)

        assert result["distributed_vendor_ids"] == ["v1", "v4", "v5"]
        assert len(result["warnings"]) == 1
        assert "distribution_records" in result["warnings"][0]
        assert any(getattr(r, "effect", None) == "distribution_records" for r in caplog.records)

    def test_round_still_throttles_after_record_failure(self, vendor_pool):
        pid = create_project(vendor_pool)

        with patch(
            "backend.core.distribution.insert_distribution_records",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            distribute_project(pid, now=T0)

        assert count_rows(vendor_pool, "quote_distributions") == 0
        with pytest.raises(CooldownActiveError):
            distribute_project(pid, now=T0 + timedelta(minutes=1))


class TestConnectionBusyTimeout:

    def test_every_connection_waits_for_the_lock(self, tmp_path, monkeypatch):
        monkeypatch.setattr(db_base, "DB_PATH", tmp_path / "marketplace.db")
        db_base.init_db()

        with db_base.get_db() as conn:
            timeout_ms = conn.execute("PRAGMA busy_timeout").fetchone()[0]

        assert timeout_ms == int(db_base.BUSY_TIMEOUT * 1000)
