"""Claim admission: the core business engine.

A claim is admitted only against occupancy recomputed from the claim log
inside the log's lock, so a client's earlier view never decides admission and
two sessions racing for the same half cannot both win.
"""

import logging
from typing import Optional

from config.defaults import SOLO_REQUIRES_APPROVAL, SHARED_REQUIRES_APPROVAL
from data.claim_log import ClaimLog
from data.validator import validate_claim_input
from engine.occupancy import compute_occupancy
from models.catalog import Catalog
from models.claim import ClaimInput, ClaimStatus
from models.results import (
    AllocationResult, OK, VALIDATION_ERROR, SPOT_UNAVAILABLE, HALF_UNAVAILABLE,
    CATALOG_LOOKUP_FAILED, CONSISTENCY_VIOLATION,
)

logger = logging.getLogger(__name__)


def admission_status(is_solo: bool, rule_config: Optional[dict] = None) -> ClaimStatus:
    """Status a newly admitted claim starts in, by policy."""
    cfg = rule_config or {}
    if is_solo:
        needs_review = cfg.get("solo_requires_approval", SOLO_REQUIRES_APPROVAL)
    else:
        needs_review = cfg.get("shared_requires_approval", SHARED_REQUIRES_APPROVAL)
    return ClaimStatus.PENDING if needs_review else ClaimStatus.APPROVED


class AllocationEngine:
    def __init__(self, catalog: Catalog, claim_log: ClaimLog, rule_config: Optional[dict] = None):
        self.catalog = catalog
        self.claim_log = claim_log
        self.rule_config = dict(rule_config or {})

    def submit(self, claim: ClaimInput) -> AllocationResult:
        """Validate, re-check against fresh occupancy, and append."""
        # Step 1: Input shape
        check = validate_claim_input(claim, self.rule_config)
        if not check.is_valid:
            logger.debug("Claim rejected at validation: %s", check.errors)
            return AllocationResult(
                tag=VALIDATION_ERROR,
                message=" ".join(check.errors),
                fields=check.fields,
            )

        lot_id = claim.lot_id.strip()
        spot_number = int(claim.spot_number)
        spot = self.catalog.lookup(lot_id, spot_number)
        if spot is None:
            return AllocationResult(
                tag=CATALOG_LOOKUP_FAILED,
                message=f"Unknown spot {lot_id}-{spot_number}.",
                fields=["lot_id", "spot_number"],
            )

        status = admission_status(claim.is_solo, self.rule_config)
        candidate = claim.to_record(status)

        with self.claim_log.transaction() as log:
            # Step 2: Fresh read
            occupancy = compute_occupancy(self.catalog, log.all_active(), log.version)

            if occupancy.has_issue(lot_id, spot_number):
                return AllocationResult(
                    tag=CONSISTENCY_VIOLATION,
                    message=f"Spot {spot.spot_id} has conflicting claims awaiting manual reconciliation.",
                )

            # Step 3: Re-check target
            busy = [
                key.half for key in candidate.halves
                if not occupancy.is_half_free(*key)
            ]
            if busy:
                tag = SPOT_UNAVAILABLE if candidate.is_solo else HALF_UNAVAILABLE
                logger.info("Claim for %s %s lost: %s already taken",
                            spot.spot_id, candidate.target_label, ", ".join(busy))
                return AllocationResult(
                    tag=tag,
                    message=f"Spot {spot.spot_id} {candidate.target_label} is no longer available.",
                )

            # Step 4: Append
            record_id = log.append(candidate)

        return AllocationResult(tag=OK, record_id=record_id, status=status.value)
