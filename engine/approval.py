"""Administrative decisions on submitted claims."""

import logging
from typing import Optional

from data.claim_log import ClaimLog, InvalidTransition, RecordNotFound
from models.claim import ClaimStatus
from models.results import DecisionResult, OK, NOT_PENDING, NOT_FOUND, UNKNOWN_DECISION

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"
DECISIONS = {APPROVE: ClaimStatus.APPROVED, REJECT: ClaimStatus.REJECTED}


class ApprovalWorkflow:
    """pending -> approved | rejected, plus removal from any status."""

    def __init__(self, claim_log: ClaimLog):
        self.claim_log = claim_log

    def decide(self, record_id: str, decision: str, decided_by: str) -> DecisionResult:
        if decision not in DECISIONS:
            return DecisionResult(UNKNOWN_DECISION, record_id,
                                  f"Unknown decision: {decision!r}. Use 'approve' or 'reject'.")
        try:
            self.claim_log.set_status(record_id, DECISIONS[decision], decided_by)
        except RecordNotFound:
            return DecisionResult(NOT_FOUND, record_id, f"Claim {record_id} does not exist.")
        except InvalidTransition as e:
            return DecisionResult(NOT_PENDING, record_id, str(e))
        return DecisionResult(OK, record_id)

    def approve(self, record_id: str, decided_by: str) -> DecisionResult:
        return self.decide(record_id, APPROVE, decided_by)

    def reject(self, record_id: str, decided_by: str) -> DecisionResult:
        return self.decide(record_id, REJECT, decided_by)

    def remove_claim(self, record_id: str, actor: str = "") -> DecisionResult:
        try:
            self.claim_log.remove(record_id, actor)
        except RecordNotFound:
            return DecisionResult(NOT_FOUND, record_id, f"Claim {record_id} does not exist.")
        return DecisionResult(OK, record_id)

    def reset_all(self, actor: str = "") -> int:
        return self.claim_log.reset_all(actor)

    def pending_queue(self, lot_id: Optional[str] = None):
        """Pending claims, oldest first."""
        return [
            r for r in self.claim_log.pending()
            if lot_id is None or r.lot_id == lot_id
        ]
