from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from models.catalog import HalfKey
from models.claim import ClaimRecord


class HalfStatus(str, Enum):
    FREE = "Free"
    PENDING_SOLO = "PendingSolo"
    PENDING_HALF = "PendingHalf"
    OCCUPIED_SOLO = "OccupiedSolo"
    OCCUPIED_HALF = "OccupiedHalf"
    BLOCKED = "Blocked"  # reserved in the catalog

    @property
    def is_free(self) -> bool:
        return self is HalfStatus.FREE

    @property
    def is_pending(self) -> bool:
        return self in (HalfStatus.PENDING_SOLO, HalfStatus.PENDING_HALF)

    @property
    def is_occupied(self) -> bool:
        return self in (HalfStatus.OCCUPIED_SOLO, HalfStatus.OCCUPIED_HALF)


@dataclass(frozen=True)
class HalfOccupancy:
    status: HalfStatus
    record: Optional[ClaimRecord] = None

    @property
    def holder(self) -> Optional[str]:
        return self.record.requester.name if self.record else None


FREE = HalfOccupancy(HalfStatus.FREE)
BLOCKED = HalfOccupancy(HalfStatus.BLOCKED)


@dataclass(frozen=True)
class ConsistencyIssue:
    """Two or more active records marking the same half."""
    half: HalfKey
    record_ids: Tuple[str, ...]

    def describe(self) -> str:
        lot_id, number, label = self.half
        return f"{lot_id}-{number} half {label} claimed by records {', '.join(self.record_ids)}"


@dataclass
class Occupancy:
    """Per-half status derived from the active claim records."""
    halves: Dict[HalfKey, HalfOccupancy] = field(default_factory=dict)
    issues: List[ConsistencyIssue] = field(default_factory=list)
    version: int = 0  # claim log version this view was computed from

    def get(self, lot_id: str, spot_number: int, half: str) -> HalfOccupancy:
        return self.halves.get(HalfKey(lot_id, spot_number, half), FREE)

    def spot(self, lot_id: str, spot_number: int) -> Dict[str, HalfOccupancy]:
        return {
            key.half: occ for key, occ in self.halves.items()
            if key.lot_id == lot_id and key.spot_number == spot_number
        }

    def for_lot(self, lot_id: str) -> Dict[HalfKey, HalfOccupancy]:
        return {key: occ for key, occ in self.halves.items() if key.lot_id == lot_id}

    def is_half_free(self, lot_id: str, spot_number: int, half: str) -> bool:
        return self.get(lot_id, spot_number, half).status.is_free

    def has_issue(self, lot_id: str, spot_number: int) -> bool:
        return any(
            i.half.lot_id == lot_id and i.half.spot_number == spot_number
            for i in self.issues
        )

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    def summary(self, lot_id: Optional[str] = None) -> Dict[str, int]:
        """Count halves per status, optionally for one lot."""
        counts = {s.value: 0 for s in HalfStatus}
        for key, occ in self.halves.items():
            if lot_id is None or key.lot_id == lot_id:
                counts[occ.status.value] += 1
        return counts
