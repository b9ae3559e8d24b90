"""Tests for the occupancy view."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from data.catalog_loader import load_catalog_json
from data.claim_log import ClaimLog
from engine.occupancy import compute_occupancy, diff_occupancy, get_occupancy, occupancy_rows
from models.catalog import HalfKey
from models.claim import ClaimRecord, ClaimStatus, Identity, Shared, Solo
from models.occupancy import HalfStatus


def make_catalog(blocked=()):
    spots = [
        {"id": f"A-{n}", "lot": "A", "number": n, "taken": n in blocked}
        for n in range(1, 6)
    ]
    return load_catalog_json({"parkingLots": {
        "A": {"name": "Hill", "spots": spots},
        "B": {"name": "Valley", "totalSpots": 3},
    }})


def make_record(record_id, spot=1, half="A", solo=False, status=ClaimStatus.APPROVED, lot="A"):
    arrangement = Solo() if solo else Shared(half, Identity("Ben", "222222222"))
    return ClaimRecord(
        requester=Identity("Ana", "111111111", "ana@school.edu"),
        lot_id=lot,
        spot_number=spot,
        arrangement=arrangement,
        status=status,
        record_id=record_id,
    )


class TestComputeOccupancy:
    def test_empty_log_all_free(self):
        occupancy = compute_occupancy(make_catalog(), [])
        assert len(occupancy.halves) == 16
        assert all(o.status is HalfStatus.FREE for o in occupancy.halves.values())

    def test_shared_marks_only_its_half(self):
        occupancy = compute_occupancy(make_catalog(), [make_record("C1", spot=2, half="A")])
        assert occupancy.get("A", 2, "A").status is HalfStatus.OCCUPIED_HALF
        assert occupancy.get("A", 2, "A").record.record_id == "C1"
        assert occupancy.get("A", 2, "B").status is HalfStatus.FREE

    def test_pending_solo_marks_both_halves(self):
        record = make_record("C1", spot=3, solo=True, status=ClaimStatus.PENDING)
        occupancy = compute_occupancy(make_catalog(), [record])
        assert occupancy.get("A", 3, "A").status is HalfStatus.PENDING_SOLO
        assert occupancy.get("A", 3, "B").status is HalfStatus.PENDING_SOLO

    def test_approved_solo(self):
        record = make_record("C1", spot=3, solo=True)
        occupancy = compute_occupancy(make_catalog(), [record])
        assert occupancy.spot("A", 3)["B"].status is HalfStatus.OCCUPIED_SOLO

    def test_pending_half(self):
        record = make_record("C1", half="B", status=ClaimStatus.PENDING)
        occupancy = compute_occupancy(make_catalog(), [record])
        assert occupancy.get("A", 1, "B").status is HalfStatus.PENDING_HALF

    def test_rejected_records_ignored(self):
        record = make_record("C1", solo=True, status=ClaimStatus.REJECTED)
        occupancy = compute_occupancy(make_catalog(), [record])
        assert occupancy.is_half_free("A", 1, "A")
        assert occupancy.is_half_free("A", 1, "B")

    def test_blocked_spot(self):
        occupancy = compute_occupancy(make_catalog(blocked={4}), [])
        assert occupancy.get("A", 4, "A").status is HalfStatus.BLOCKED
        assert occupancy.summary("A")["Blocked"] == 2

    def test_conflict_reported_not_resolved_silently(self):
        records = [
            make_record("C1", spot=1, half="A"),
            make_record("C2", spot=1, solo=True),
        ]
        occupancy = compute_occupancy(make_catalog(), records)
        assert not occupancy.is_consistent
        assert occupancy.has_issue("A", 1)
        issue = occupancy.issues[0]
        assert issue.half == HalfKey("A", 1, "A")
        assert issue.record_ids == ("C1", "C2")
        # first claimant kept, second's other half still shown
        assert occupancy.get("A", 1, "A").record.record_id == "C1"
        assert occupancy.get("A", 1, "B").record.record_id == "C2"

    def test_claim_on_blocked_spot_is_a_conflict(self):
        occupancy = compute_occupancy(make_catalog(blocked={4}), [make_record("C1", spot=4)])
        assert occupancy.has_issue("A", 4)
        assert occupancy.get("A", 4, "A").status is HalfStatus.BLOCKED

    def test_unknown_spot_ignored(self):
        occupancy = compute_occupancy(make_catalog(), [make_record("C1", spot=99)])
        assert occupancy.is_consistent
        assert all(o.status is HalfStatus.FREE for o in occupancy.halves.values())

    def test_recompute_is_pure(self):
        catalog = make_catalog()
        records = [
            make_record("C1", spot=1, half="A"),
            make_record("C2", spot=2, solo=True, status=ClaimStatus.PENDING),
        ]
        first = compute_occupancy(catalog, records)
        second = compute_occupancy(catalog, records)
        assert first == second
        assert diff_occupancy(first, second) == []


class TestDiffAndRows:
    def test_diff_lists_changed_halves(self):
        catalog = make_catalog()
        before = compute_occupancy(catalog, [])
        after = compute_occupancy(catalog, [make_record("C1", spot=2, solo=True)])
        assert diff_occupancy(before, after) == [HalfKey("A", 2, "A"), HalfKey("A", 2, "B")]

    def test_rows_for_lot(self):
        catalog = make_catalog()
        occupancy = compute_occupancy(catalog, [make_record("C1", spot=1, half="B")])
        rows = occupancy_rows(catalog, occupancy, "A")
        assert len(rows) == 5
        assert rows[0]["half_a"] == "Free"
        assert rows[0]["half_b"] == "OccupiedHalf"
        assert rows[0]["holder_b"] == "Ana"
        assert occupancy_rows(catalog, occupancy, "Z") == []


class TestGetOccupancy:
    def test_reads_current_log_for_one_lot(self):
        catalog = make_catalog()
        log = ClaimLog()
        log.append(make_record(None, lot="B", spot=2, half="A"))
        occupancy = get_occupancy(catalog, log, "B")
        assert all(key.lot_id == "B" for key in occupancy.halves)
        assert occupancy.get("B", 2, "A").status is HalfStatus.OCCUPIED_HALF
        assert occupancy.version == log.version
