"""Tests for the claim log."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import threading
from datetime import datetime, timedelta

import pytest

from data.claim_log import ClaimLog, InvalidTransition, RecordNotFound
from models.claim import ClaimRecord, ClaimStatus, Identity, Shared, Solo


def make_clock(start=datetime(2026, 3, 1, 9, 0)):
    ticks = iter(start + timedelta(seconds=i) for i in range(10_000))
    return lambda: next(ticks)


def make_record(lot="A", spot=5, half="A", solo=False, status=ClaimStatus.APPROVED, name="Ana"):
    arrangement = Solo() if solo else Shared(half, Identity("Ben", "222222222"))
    return ClaimRecord(
        requester=Identity(name, "111111111", "ana@school.edu"),
        lot_id=lot,
        spot_number=spot,
        arrangement=arrangement,
        status=status,
    )


class TestAppend:
    def test_assigns_id_and_timestamp(self):
        log = ClaimLog(clock=make_clock())
        record_id = log.append(make_record())
        stored = log.get(record_id)
        assert record_id == "C00001"
        assert stored.record_id == record_id
        assert stored.created_at == datetime(2026, 3, 1, 9, 0)

    def test_insertion_order(self):
        log = ClaimLog()
        ids = [log.append(make_record(spot=n)) for n in (3, 1, 2)]
        assert [r.record_id for r in log.all_active()] == ids

    def test_does_not_check_invariants(self):
        log = ClaimLog()
        log.append(make_record())
        log.append(make_record())
        assert len(log.all_active()) == 2

    def test_version_increments(self):
        log = ClaimLog()
        v0 = log.version
        log.append(make_record())
        assert log.version == v0 + 1


class TestSetStatus:
    def test_pending_to_approved(self):
        log = ClaimLog(clock=make_clock())
        rid = log.append(make_record(solo=True, status=ClaimStatus.PENDING))
        updated = log.set_status(rid, ClaimStatus.APPROVED, "admin")
        assert updated.status is ClaimStatus.APPROVED
        assert updated.decided_by == "admin"
        assert updated.decided_at is not None

    def test_rejected_is_not_active(self):
        log = ClaimLog()
        rid = log.append(make_record(solo=True, status=ClaimStatus.PENDING))
        log.set_status(rid, ClaimStatus.REJECTED, "admin")
        assert log.all_active() == []
        assert log.get(rid).status is ClaimStatus.REJECTED
        assert len(log.all_records()) == 1

    def test_not_pending_fails(self):
        log = ClaimLog()
        rid = log.append(make_record(status=ClaimStatus.APPROVED))
        with pytest.raises(InvalidTransition):
            log.set_status(rid, ClaimStatus.REJECTED, "admin")

    def test_pending_target_is_illegal(self):
        log = ClaimLog()
        rid = log.append(make_record(solo=True, status=ClaimStatus.PENDING))
        with pytest.raises(InvalidTransition):
            log.set_status(rid, ClaimStatus.PENDING, "admin")
        with pytest.raises(InvalidTransition):
            log.set_status(rid, "removed", "admin")
        assert log.get(rid).status is ClaimStatus.PENDING

    def test_unknown_record(self):
        log = ClaimLog()
        with pytest.raises(RecordNotFound):
            log.set_status("C99999", ClaimStatus.APPROVED, "admin")


class TestRemoveAndReset:
    def test_remove_any_status(self):
        log = ClaimLog()
        approved = log.append(make_record(spot=1))
        rejected = log.append(make_record(spot=2, solo=True, status=ClaimStatus.PENDING))
        log.set_status(rejected, ClaimStatus.REJECTED, "admin")
        log.remove(approved, "admin")
        log.remove(rejected, "admin")
        assert log.all_records() == []

    def test_remove_unknown(self):
        with pytest.raises(RecordNotFound):
            ClaimLog().remove("C00042")

    def test_reset_all(self):
        log = ClaimLog()
        for n in range(1, 4):
            log.append(make_record(spot=n))
        assert log.reset_all("admin") == 3
        assert log.all_records() == []
        assert log.audit_log()[-1].action == "reset"

    def test_ids_not_reused_after_remove(self):
        log = ClaimLog()
        first = log.append(make_record())
        log.remove(first)
        assert log.append(make_record()) != first


class TestAuditAndListeners:
    def test_audit_trail(self):
        log = ClaimLog()
        rid = log.append(make_record(solo=True, status=ClaimStatus.PENDING))
        log.set_status(rid, ClaimStatus.APPROVED, "dean")
        log.remove(rid, "dean")
        actions = [e.action for e in log.audit_log()]
        assert actions == ["admit", "approve", "remove"]
        assert log.audit_log()[1].actor == "dean"

    def test_listener_called_with_version(self):
        log = ClaimLog()
        seen = []
        log.add_listener(seen.append)
        log.append(make_record())
        log.reset_all()
        assert seen == [1, 2]

    def test_listener_waits_for_transaction_to_release_lock(self):
        log = ClaimLog()
        seen = []

        def read_from_other_thread(version):
            reader = threading.Thread(target=lambda: seen.append(len(log.all_active())))
            reader.start()
            reader.join(timeout=2)

        log.add_listener(read_from_other_thread)
        with log.transaction() as txn:
            txn.append(make_record())
            txn.append(make_record(half="B"))
            assert seen == []
        assert seen == [2]

    def test_failing_listener_does_not_break_write(self):
        log = ClaimLog()

        def boom(version):
            raise RuntimeError("listener down")

        log.add_listener(boom)
        rid = log.append(make_record())
        assert log.get(rid) is not None

    def test_remove_listener(self):
        log = ClaimLog()
        seen = []
        log.add_listener(seen.append)
        log.remove_listener(seen.append)
        log.append(make_record())
        assert seen == []


class TestPersistence:
    def test_written_through_and_reloaded(self, tmp_path):
        path = str(tmp_path / "claims.json")
        log = ClaimLog(path=path)
        rid = log.append(make_record(solo=True, status=ClaimStatus.PENDING))
        log.set_status(rid, ClaimStatus.APPROVED, "admin")

        with open(path) as fh:
            document = json.load(fh)
        assert document["records"][0]["status"] == "approved"

        reopened = ClaimLog(path=path)
        record = reopened.get(rid)
        assert record.is_solo
        assert record.status is ClaimStatus.APPROVED
        assert len(reopened.audit_log()) == 2
        assert reopened.append(make_record(spot=9)) == "C00002"

    def test_shared_record_round_trip(self, tmp_path):
        path = str(tmp_path / "claims.json")
        rid = ClaimLog(path=path).append(make_record(half="B"))
        record = ClaimLog(path=path).get(rid)
        assert record.half == "B"
        assert record.partner.person_id == "222222222"

    def test_picks_up_other_writer(self, tmp_path):
        path = str(tmp_path / "claims.json")
        reader = ClaimLog(path=path)
        writer = ClaimLog(path=path)
        writer.append(make_record())
        # force a distinct mtime in case both writes land in the same tick
        stat = os.stat(path)
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000))
        assert len(reader.all_active()) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
