"""Occupancy view: per-half status derived from the active claim records."""

import logging
from typing import Dict, Iterable, List, Optional

from config.defaults import HALF_LABELS
from models.catalog import Catalog, HalfKey
from models.claim import ClaimRecord, ClaimStatus
from models.occupancy import (
    BLOCKED, FREE, ConsistencyIssue, HalfOccupancy, HalfStatus, Occupancy,
)

logger = logging.getLogger(__name__)


def status_for(record: ClaimRecord) -> HalfStatus:
    """Half status a single active record imposes on the halves it targets."""
    if record.status is ClaimStatus.PENDING:
        return HalfStatus.PENDING_SOLO if record.is_solo else HalfStatus.PENDING_HALF
    return HalfStatus.OCCUPIED_SOLO if record.is_solo else HalfStatus.OCCUPIED_HALF


def compute_occupancy(
    catalog: Catalog,
    active_records: Iterable[ClaimRecord],
    version: int = 0,
) -> Occupancy:
    """Build the status of every half from scratch.

    Conflicting records (two active records marking the same half) are never
    resolved here: the first record in log order is kept on the half and the
    conflict is reported as a ConsistencyIssue for manual reconciliation.
    """
    halves: Dict[HalfKey, HalfOccupancy] = {}
    for spot in catalog.iter_spots():
        for key in spot.halves:
            halves[key] = BLOCKED if spot.blocked else FREE

    claimants: Dict[HalfKey, List[str]] = {}
    for record in active_records:
        if not record.status.is_active:
            continue
        spot = catalog.lookup(record.lot_id, record.spot_number)
        if spot is None:
            logger.warning("Claim %s targets unknown spot %s; ignored",
                           record.record_id, record.spot_id)
            continue
        marked = HalfOccupancy(status_for(record), record)
        for key in record.halves:
            # a blocked spot counts as already claimed by the catalog
            ids = claimants.setdefault(key, ["catalog"] if spot.blocked else [])
            ids.append(record.record_id or "?")
            if len(ids) == 1:
                halves[key] = marked

    issues = [
        ConsistencyIssue(half=key, record_ids=tuple(ids))
        for key, ids in claimants.items() if len(ids) > 1
    ]
    for issue in issues:
        logger.error("Consistency violation: %s", issue.describe())

    return Occupancy(halves=halves, issues=issues, version=version)


def get_occupancy(catalog: Catalog, claim_log, lot_id: Optional[str] = None) -> Occupancy:
    """Fresh occupancy from the current claim log, optionally for one lot."""
    with claim_log.transaction():
        occupancy = compute_occupancy(catalog, claim_log.all_active(), claim_log.version)
    if lot_id is None:
        return occupancy
    issues = [i for i in occupancy.issues if i.half.lot_id == lot_id]
    return Occupancy(halves=occupancy.for_lot(lot_id), issues=issues, version=occupancy.version)


def diff_occupancy(before: Occupancy, after: Occupancy) -> List[HalfKey]:
    """Halves whose status or holder changed between two views."""
    changed = []
    for key in after.halves.keys() | before.halves.keys():
        old = before.halves.get(key, FREE)
        new = after.halves.get(key, FREE)
        old_id = old.record.record_id if old.record else None
        new_id = new.record.record_id if new.record else None
        if old.status is not new.status or old_id != new_id:
            changed.append(key)
    return sorted(changed)


def occupancy_rows(catalog: Catalog, occupancy: Occupancy, lot_id: str) -> List[dict]:
    """Flatten one lot's occupancy into table rows, one per spot."""
    lot = catalog.lot(lot_id)
    if lot is None:
        return []
    rows = []
    for spot in lot.spots:
        halves = {h: occupancy.get(lot_id, spot.number, h) for h in HALF_LABELS}
        rows.append({
            "spot_id": spot.spot_id,
            "spot_number": spot.number,
            "half_a": halves["A"].status.value,
            "half_b": halves["B"].status.value,
            "holder_a": halves["A"].holder or "",
            "holder_b": halves["B"].holder or "",
        })
    return rows
