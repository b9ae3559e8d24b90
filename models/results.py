"""Typed outcomes returned at the submission and decision boundaries."""

from dataclasses import dataclass, field
from typing import List, Optional

OK = "Ok"
VALIDATION_ERROR = "ValidationError"
SPOT_UNAVAILABLE = "SpotUnavailable"
HALF_UNAVAILABLE = "HalfUnavailable"
CATALOG_LOOKUP_FAILED = "CatalogLookupFailed"
NOT_PENDING = "NotPending"
NOT_FOUND = "NotFound"
UNKNOWN_DECISION = "UnknownDecision"
CONSISTENCY_VIOLATION = "ConsistencyViolation"

# Contention errors: caller should refresh occupancy and may retry
RETRYABLE_TAGS = {SPOT_UNAVAILABLE, HALF_UNAVAILABLE}


@dataclass
class AllocationResult:
    tag: str
    record_id: Optional[str] = None
    status: Optional[str] = None         # status of the admitted record
    message: str = ""
    fields: List[str] = field(default_factory=list)  # input fields at fault

    @property
    def ok(self) -> bool:
        return self.tag == OK

    @property
    def retryable(self) -> bool:
        return self.tag in RETRYABLE_TAGS


@dataclass
class DecisionResult:
    tag: str
    record_id: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.tag == OK
