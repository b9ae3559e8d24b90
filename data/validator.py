"""Schema validation for catalog files and claim submissions."""

import re
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from config.defaults import (
    REQUESTER_ID_LENGTH, CONTACT_DOMAIN_SUFFIX, HALF_LABELS,
)
from models.claim import ClaimInput


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)

    def fail(self, field_name: Optional[str], message: str):
        self.is_valid = False
        self.errors.append(message)
        if field_name and field_name not in self.fields:
            self.fields.append(field_name)


def whole_number(value) -> Optional[int]:
    """Return ``value`` as an int when it names a whole number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        return int(value) if re.fullmatch(r"[+-]?\d+", value) else None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number == value else None


CATALOG_REQUIRED_COLUMNS = [
    "Lot ID",
    "Lot Name",
    "Spot Number",
]


def validate_catalog_df(df: pd.DataFrame) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in CATALOG_REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        result.fail(None, f"Catalog: Missing required columns: {', '.join(missing)}")
        return result
    if df.empty:
        result.fail(None, "Catalog: File contains no data rows.")
        return result

    if df["Lot ID"].isna().any() or (df["Lot ID"].astype(str).str.strip() == "").any():
        result.fail("Lot ID", "Catalog: Every spot must belong to a lot.")

    numbers = pd.to_numeric(df["Spot Number"], errors="coerce")
    if numbers.isna().any():
        result.fail("Spot Number", "Catalog: Spot Number must be numeric.")
    elif (numbers % 1 != 0).any():
        result.fail("Spot Number", "Catalog: Spot Number must be a whole number.")
    elif (numbers <= 0).any():
        result.fail("Spot Number", "Catalog: Spot Number must be positive.")

    dupes = df.duplicated(subset=["Lot ID", "Spot Number"], keep=False)
    if dupes.any():
        dupe_rows = df[dupes][["Lot ID", "Spot Number"]].drop_duplicates().to_dict("records")
        result.fail("Spot Number", f"Catalog: Duplicate spot entries: {dupe_rows}")

    names = df.groupby("Lot ID")["Lot Name"].nunique()
    inconsistent = names[names > 1].index.tolist()
    if inconsistent:
        result.warnings.append(
            f"Catalog: Lots with more than one name: {inconsistent}. The first name is used."
        )
    return result


def validate_claim_input(claim: ClaimInput, rule_config: Optional[dict] = None) -> ValidationResult:
    """Check the shape of a claim before it touches the claim log."""
    cfg = rule_config or {}
    id_length = cfg.get("requester_id_length", REQUESTER_ID_LENGTH)
    suffix = cfg.get("contact_domain_suffix", CONTACT_DOMAIN_SUFFIX).lower()
    id_pattern = re.compile(rf"^\d{{{id_length}}}$")

    result = ValidationResult()

    if not (claim.requester_name or "").strip():
        result.fail("requester_name", "Name is required.")
    if not id_pattern.match((claim.requester_id or "").strip()):
        result.fail("requester_id", f"ID must be exactly {id_length} digits.")

    contact = (claim.contact or "").strip().lower()
    if not contact:
        result.fail("contact", "Contact is required.")
    elif not contact.endswith(suffix) or len(contact) == len(suffix):
        result.fail("contact", f"Contact must end with {suffix}.")

    if not (claim.lot_id or "").strip():
        result.fail("lot_id", "Lot is required.")
    spot_number = whole_number(claim.spot_number)
    if spot_number is None:
        result.fail("spot_number", "Spot number must be a whole number.")
    elif spot_number <= 0:
        result.fail("spot_number", "Spot number must be positive.")

    if claim.is_solo:
        if claim.partner_name or claim.partner_id:
            result.fail("partner_name", "A solo claim cannot name a partner.")
        return result

    half = (claim.half or "").strip().upper()
    if half not in HALF_LABELS:
        result.fail("half", f"Half must be one of {', '.join(HALF_LABELS)}.")

    if not (claim.partner_name or "").strip():
        result.fail("partner_name", "Partner name is required for a shared spot.")
    partner_id = (claim.partner_id or "").strip()
    if not id_pattern.match(partner_id):
        result.fail("partner_id", f"Partner ID must be exactly {id_length} digits.")
    elif partner_id == (claim.requester_id or "").strip():
        result.fail("partner_id", "Partner must be a different person.")

    return result
