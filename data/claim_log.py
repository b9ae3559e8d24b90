"""Authoritative claim log: the only mutable shared state in the service.

Every mutation runs under one re-entrant lock and is written through to the
backing JSON file (when configured) before the in-memory state is swapped, so
readers never observe a partial write. Other processes writing the same file
are picked up on the next read by comparing the file's modification time.
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional

from models.audit import AuditEntry
from models.claim import ClaimRecord, ClaimStatus

logger = logging.getLogger(__name__)

LEGAL_DECISIONS = (ClaimStatus.APPROVED, ClaimStatus.REJECTED)


class InvalidTransition(Exception):
    """Status change not allowed from the record's current status."""


class RecordNotFound(KeyError):
    pass


class ClaimLog:
    def __init__(self, path: Optional[str] = None, clock: Callable[[], datetime] = datetime.now):
        self._lock = threading.RLock()
        self._path = path
        self._clock = clock
        self._records: Dict[str, ClaimRecord] = {}
        self._audit: List[AuditEntry] = []
        self._next_seq = 1
        self._version = 0
        self._mtime_ns: Optional[int] = None
        self._listeners: List[Callable[[int], None]] = []
        self._depth = 0
        self._held_version: Optional[int] = None
        if path and os.path.exists(path):
            self._load()

    # --- Locking ---

    @contextmanager
    def transaction(self) -> Iterator["ClaimLog"]:
        """Hold the log lock across a read-validate-append sequence.

        Listeners for mutations made inside the block run once the outermost
        transaction has released the lock.
        """
        version = None
        try:
            with self._lock:
                self._depth += 1
                try:
                    self._reload_if_changed()
                    yield self
                finally:
                    self._depth -= 1
                    if not self._depth:
                        version, self._held_version = self._held_version, None
        finally:
            self._notify(version)

    @property
    def version(self) -> int:
        with self._lock:
            self._reload_if_changed()
            return self._version

    # --- Reads ---

    def get(self, record_id: str) -> ClaimRecord:
        with self._lock:
            self._reload_if_changed()
            try:
                return self._records[record_id]
            except KeyError:
                raise RecordNotFound(record_id) from None

    def all_active(self) -> List[ClaimRecord]:
        """Pending and approved records in insertion order."""
        with self._lock:
            self._reload_if_changed()
            return [r for r in self._records.values() if r.status.is_active]

    def all_records(self) -> List[ClaimRecord]:
        with self._lock:
            self._reload_if_changed()
            return list(self._records.values())

    def pending(self) -> List[ClaimRecord]:
        return [r for r in self.all_active() if r.status is ClaimStatus.PENDING]

    def audit_log(self) -> List[AuditEntry]:
        with self._lock:
            return list(self._audit)

    # --- Mutations ---

    def append(self, candidate: ClaimRecord, actor: str = "") -> str:
        """Assign identity and timestamp and store the record. Does not check invariants."""
        with self._lock:
            self._reload_if_changed()
            record_id = f"C{self._next_seq:05d}"
            record = ClaimRecord(
                requester=candidate.requester,
                lot_id=candidate.lot_id,
                spot_number=candidate.spot_number,
                arrangement=candidate.arrangement,
                status=candidate.status,
                record_id=record_id,
                created_at=self._clock(),
            )
            records = dict(self._records)
            records[record_id] = record
            entry = self._entry("admit", record_id, "", record.status.value,
                                actor or record.requester.person_id,
                                f"{record.spot_id} {record.target_label}")
            self._commit(records, entry, self._next_seq + 1)
            logger.info("Claim %s appended for %s %s (%s)",
                        record_id, record.spot_id, record.target_label, record.status.value)
            version = self._defer(self._version)
        self._notify(version)
        return record_id

    def set_status(self, record_id: str, new_status: ClaimStatus, decided_by: str) -> ClaimRecord:
        """Move a pending record to approved or rejected."""
        with self._lock:
            self._reload_if_changed()
            current = self.get(record_id)
            try:
                new_status = ClaimStatus(new_status)
            except ValueError:
                raise InvalidTransition(f"{new_status!r} is not a claim status") from None
            if new_status not in LEGAL_DECISIONS:
                raise InvalidTransition(f"{new_status.value} is not a decision")
            if current.status is not ClaimStatus.PENDING:
                raise InvalidTransition(
                    f"Claim {record_id} is {current.status.value}, not pending"
                )
            updated = current.with_decision(new_status, decided_by, self._clock())
            records = dict(self._records)
            records[record_id] = updated
            action = "approve" if new_status is ClaimStatus.APPROVED else "reject"
            entry = self._entry(action, record_id, current.status.value, new_status.value, decided_by)
            self._commit(records, entry)
            logger.info("Claim %s %s by %s", record_id, new_status.value, decided_by)
            version = self._defer(self._version)
        self._notify(version)
        return updated

    def remove(self, record_id: str, actor: str = "") -> ClaimRecord:
        """Delete a record from any status, freeing its target."""
        with self._lock:
            self._reload_if_changed()
            removed = self.get(record_id)
            records = dict(self._records)
            del records[record_id]
            entry = self._entry("remove", record_id, removed.status.value, "removed", actor,
                                f"{removed.spot_id} {removed.target_label}")
            self._commit(records, entry)
            logger.info("Claim %s removed by %s", record_id, actor or "admin")
            version = self._defer(self._version)
        self._notify(version)
        return removed

    def reset_all(self, actor: str = "") -> int:
        """Clear every record. Returns how many were dropped."""
        with self._lock:
            self._reload_if_changed()
            count = len(self._records)
            entry = self._entry("reset", None, f"{count} records", "empty", actor)
            self._commit({}, entry)
            logger.warning("Claim log reset by %s: %d records cleared", actor or "admin", count)
            version = self._defer(self._version)
        self._notify(version)
        return count

    # --- Observers ---

    def add_listener(self, fn: Callable[[int], None]):
        """Register ``fn(version)``, called after every mutation."""
        with self._lock:
            self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[int], None]):
        with self._lock:
            try:
                self._listeners.remove(fn)
            except ValueError:
                pass

    def _defer(self, version: int) -> Optional[int]:
        if self._depth:
            self._held_version = version
            return None
        return version

    def _notify(self, version: Optional[int]):
        if version is None:
            return
        with self._lock:
            listeners = list(self._listeners)
        for fn in listeners:
            try:
                fn(version)
            except Exception:
                logger.exception("Claim log listener %r failed", fn)

    # --- Persistence ---

    def _entry(self, action, record_id, old, new, actor, detail="") -> AuditEntry:
        return AuditEntry(
            timestamp=self._clock(),
            action=action,
            record_id=record_id,
            old_status=old,
            new_status=new,
            actor=actor,
            detail=detail,
        )

    def _commit(self, records: Dict[str, ClaimRecord], entry: AuditEntry,
                next_seq: Optional[int] = None):
        """Write the new state through, then publish it in memory."""
        seq = self._next_seq if next_seq is None else next_seq
        audit = self._audit + [entry]
        if self._path:
            self._write(records, audit, seq)
        self._records = records
        self._audit = audit
        self._next_seq = seq
        self._version += 1

    def _write(self, records: Dict[str, ClaimRecord], audit: List[AuditEntry], next_seq: int):
        document = {
            "next_seq": next_seq,
            "records": [r.to_dict() for r in records.values()],
            "audit": [
                {**asdict(e), "timestamp": e.timestamp.isoformat()} for e in audit
            ],
        }
        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".claims-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2)
            os.replace(tmp_path, self._path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        self._mtime_ns = os.stat(self._path).st_mtime_ns
        logger.debug("Claim log written to %s (%d records)", self._path, len(records))

    def _load(self):
        with open(self._path, encoding="utf-8") as fh:
            document = json.load(fh)
        records = [ClaimRecord.from_dict(d) for d in document.get("records", [])]
        self._records = {r.record_id: r for r in records}
        self._audit = [
            AuditEntry(**{**e, "timestamp": datetime.fromisoformat(e["timestamp"])})
            for e in document.get("audit", [])
        ]
        self._next_seq = document.get("next_seq", len(records) + 1)
        self._mtime_ns = os.stat(self._path).st_mtime_ns
        self._version += 1
        logger.info("Claim log loaded from %s (%d records)", self._path, len(records))

    def _reload_if_changed(self):
        if not self._path or not os.path.exists(self._path):
            return
        if os.stat(self._path).st_mtime_ns != self._mtime_ns:
            self._load()
