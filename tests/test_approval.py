"""Tests for the approval workflow."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from data.catalog_loader import load_catalog_json
from data.claim_log import ClaimLog
from engine.allocation_engine import AllocationEngine
from engine.approval import ApprovalWorkflow, APPROVE, REJECT
from engine.occupancy import get_occupancy
from models.claim import ClaimInput, ClaimStatus
from models.occupancy import HalfStatus
from models.results import OK, NOT_PENDING, NOT_FOUND, UNKNOWN_DECISION


def make_setup():
    catalog = load_catalog_json({"parkingLots": {"A": {"name": "Hill", "totalSpots": 10}}})
    log = ClaimLog()
    return catalog, log, AllocationEngine(catalog, log), ApprovalWorkflow(log)


def make_solo(spot=3, person_id="123456789"):
    return ClaimInput("Ana", person_id, "ana@school.edu", "A", spot, is_solo=True)


def make_shared(spot=3, half="A"):
    return ClaimInput("Ben", "987654321", "ben@school.edu", "A", spot, half=half,
                      partner_name="Cy", partner_id="111222333")


class TestDecide:
    def test_approve_occupies_both_halves(self):
        catalog, log, engine, workflow = make_setup()
        rid = engine.submit(make_solo()).record_id
        result = workflow.decide(rid, APPROVE, "dean")
        assert result.tag == OK
        occupancy = get_occupancy(catalog, log)
        assert occupancy.get("A", 3, "A").status is HalfStatus.OCCUPIED_SOLO
        assert occupancy.get("A", 3, "B").status is HalfStatus.OCCUPIED_SOLO
        assert log.get(rid).decided_by == "dean"

    def test_reject_frees_target_and_keeps_record(self):
        catalog, log, engine, workflow = make_setup()
        rid = engine.submit(make_solo()).record_id
        assert workflow.reject(rid, "dean").ok
        occupancy = get_occupancy(catalog, log)
        assert occupancy.is_half_free("A", 3, "A")
        assert occupancy.is_half_free("A", 3, "B")
        assert log.get(rid).status is ClaimStatus.REJECTED

    @pytest.mark.parametrize("first", [APPROVE, REJECT])
    def test_decision_is_terminal(self, first):
        _, _, engine, workflow = make_setup()
        rid = engine.submit(make_solo()).record_id
        assert workflow.decide(rid, first, "dean").ok
        for again in (APPROVE, REJECT):
            assert workflow.decide(rid, again, "dean").tag == NOT_PENDING

    def test_auto_approved_shared_is_not_pending(self):
        _, _, engine, workflow = make_setup()
        rid = engine.submit(make_shared()).record_id
        assert workflow.approve(rid, "dean").tag == NOT_PENDING

    def test_unknown_record(self):
        _, _, _, workflow = make_setup()
        assert workflow.decide("C00404", APPROVE, "dean").tag == NOT_FOUND

    def test_unknown_decision(self):
        _, _, engine, workflow = make_setup()
        rid = engine.submit(make_solo()).record_id
        result = workflow.decide(rid, "maybe", "dean")
        assert result.tag == UNKNOWN_DECISION
        assert not result.ok
        assert engine.claim_log.get(rid).status is ClaimStatus.PENDING

    def test_pending_queue(self):
        _, _, engine, workflow = make_setup()
        first = engine.submit(make_solo(spot=1)).record_id
        engine.submit(make_shared(spot=2))
        second = engine.submit(make_solo(spot=4, person_id="555555555")).record_id
        assert [r.record_id for r in workflow.pending_queue()] == [first, second]
        workflow.approve(first, "dean")
        assert [r.record_id for r in workflow.pending_queue("A")] == [second]


class TestRemoval:
    def test_remove_approved_frees_spot(self):
        catalog, log, engine, workflow = make_setup()
        rid = engine.submit(make_shared()).record_id
        assert workflow.remove_claim(rid, "dean").ok
        assert get_occupancy(catalog, log).is_half_free("A", 3, "A")
        assert engine.submit(make_solo()).ok

    def test_remove_rejected(self):
        _, log, engine, workflow = make_setup()
        rid = engine.submit(make_solo()).record_id
        workflow.reject(rid, "dean")
        assert workflow.remove_claim(rid).ok
        assert log.all_records() == []

    def test_remove_unknown(self):
        _, _, _, workflow = make_setup()
        assert workflow.remove_claim("C00404").tag == NOT_FOUND

    def test_reset_all_releases_catalog(self):
        catalog, log, engine, workflow = make_setup()
        for spot in range(1, 6):
            engine.submit(make_solo(spot=spot))
        assert workflow.reset_all("dean") == 5
        occupancy = get_occupancy(catalog, log)
        assert occupancy.summary()["Free"] == 20
