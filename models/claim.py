from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from config.defaults import HALF_LABELS, WHOLE_SPOT_LABEL
from models.catalog import HalfKey


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_active(self) -> bool:
        return self in (ClaimStatus.PENDING, ClaimStatus.APPROVED)


@dataclass(frozen=True)
class Identity:
    name: str
    person_id: str
    contact: str = ""


@dataclass(frozen=True)
class Solo:
    """Whole spot, both halves, one requester."""


@dataclass(frozen=True)
class Shared:
    """One half of a spot, shared with a named partner."""
    half: str
    partner: Identity


Arrangement = Union[Solo, Shared]


@dataclass(frozen=True)
class ClaimRecord:
    requester: Identity
    lot_id: str
    spot_number: int
    arrangement: Arrangement
    status: ClaimStatus = ClaimStatus.PENDING
    record_id: Optional[str] = None
    created_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None

    @property
    def is_solo(self) -> bool:
        return isinstance(self.arrangement, Solo)

    @property
    def half(self) -> Optional[str]:
        return None if self.is_solo else self.arrangement.half

    @property
    def partner(self) -> Optional[Identity]:
        return None if self.is_solo else self.arrangement.partner

    @property
    def spot_id(self) -> str:
        return f"{self.lot_id}-{self.spot_number}"

    @property
    def target_label(self) -> str:
        return WHOLE_SPOT_LABEL if self.is_solo else self.arrangement.half

    @property
    def halves(self) -> Tuple[HalfKey, ...]:
        """Halves this record occupies while active."""
        labels = HALF_LABELS if self.is_solo else (self.arrangement.half,)
        return tuple(HalfKey(self.lot_id, self.spot_number, h) for h in labels)

    def with_decision(self, status: ClaimStatus, decided_by: str, decided_at: datetime) -> "ClaimRecord":
        return replace(self, status=status, decided_by=decided_by, decided_at=decided_at)

    def to_dict(self) -> dict:
        data = {
            "record_id": self.record_id,
            "requester_name": self.requester.name,
            "requester_id": self.requester.person_id,
            "contact": self.requester.contact,
            "lot_id": self.lot_id,
            "spot_number": self.spot_number,
            "solo": self.is_solo,
            "half": self.half,
            "partner_name": None,
            "partner_id": None,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "decided_by": self.decided_by,
        }
        if not self.is_solo:
            data["partner_name"] = self.partner.name
            data["partner_id"] = self.partner.person_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ClaimRecord":
        if data.get("solo"):
            arrangement = Solo()
        else:
            arrangement = Shared(
                half=data["half"],
                partner=Identity(data.get("partner_name") or "", data.get("partner_id") or ""),
            )
        created = data.get("created_at")
        decided = data.get("decided_at")
        return cls(
            requester=Identity(data["requester_name"], data["requester_id"], data.get("contact", "")),
            lot_id=data["lot_id"],
            spot_number=int(data["spot_number"]),
            arrangement=arrangement,
            status=ClaimStatus(data["status"]),
            record_id=data.get("record_id"),
            created_at=datetime.fromisoformat(created) if created else None,
            decided_at=datetime.fromisoformat(decided) if decided else None,
            decided_by=data.get("decided_by"),
        )


@dataclass
class ClaimInput:
    """Raw claim submission, as typed into the request form."""
    requester_name: str
    requester_id: str
    contact: str
    lot_id: str
    spot_number: int
    half: Optional[str] = None       # "A" / "B"; ignored when is_solo
    is_solo: bool = False
    partner_name: Optional[str] = None
    partner_id: Optional[str] = None

    def to_record(self, status: ClaimStatus) -> ClaimRecord:
        """Build the candidate record; call only after validation."""
        if self.is_solo:
            arrangement = Solo()
        else:
            arrangement = Shared(
                half=self.half.strip().upper(),
                partner=Identity(self.partner_name.strip(), self.partner_id.strip()),
            )
        return ClaimRecord(
            requester=Identity(
                self.requester_name.strip(),
                self.requester_id.strip(),
                self.contact.strip().lower(),
            ),
            lot_id=self.lot_id.strip(),
            spot_number=int(self.spot_number),
            arrangement=arrangement,
            status=status,
        )
