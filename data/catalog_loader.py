"""Catalog parsing: JSON/CSV/XLSX into the Lot/Spot hierarchy."""

import json
import logging
import os
from typing import Dict, List

import pandas as pd

from data.validator import validate_catalog_df, whole_number
from models.catalog import Catalog, Lot, Spot

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Malformed catalog description."""


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "x")
    return bool(value) and not pd.isna(value)


def _build_lot(lot_id: str, name: str, spots: List[Spot]) -> Lot:
    seen = set()
    for s in spots:
        if s.number <= 0:
            raise CatalogError(f"Lot {lot_id}: spot number must be positive, got {s.number}")
        if s.number in seen:
            raise CatalogError(f"Lot {lot_id}: duplicate spot id {s.spot_id}")
        seen.add(s.number)
    return Lot(lot_id=lot_id, name=name, spots=tuple(sorted(spots, key=lambda s: s.number)))


def load_catalog_json(document: dict) -> Catalog:
    """Parse a ``{"parkingLots": {...}}`` document.

    Each lot entry has ``name`` and either a ``spots`` list
    (``{"id", "lot", "number", "taken"}``) or only ``totalSpots``, in which
    case spots 1..totalSpots are generated.
    """
    lots_doc = document.get("parkingLots") if isinstance(document, dict) else None
    if not lots_doc:
        raise CatalogError("Catalog has no lots.")
    if not isinstance(lots_doc, dict):
        raise CatalogError("parkingLots must map lot ids to lot entries.")

    lots: Dict[str, Lot] = {}
    for lot_id, entry in lots_doc.items():
        lot_id = str(lot_id).strip()
        if not lot_id:
            raise CatalogError("Catalog contains a lot without an id.")
        if not isinstance(entry, dict):
            raise CatalogError(f"Lot {lot_id}: entry must be an object, got {entry!r}")
        name = str(entry.get("name") or lot_id)
        raw_spots = entry.get("spots")

        if raw_spots is None:
            total = entry.get("totalSpots")
            if isinstance(total, bool) or not isinstance(total, int) or total <= 0:
                raise CatalogError(f"Lot {lot_id}: totalSpots must be a positive integer, got {total!r}")
            spots = [Spot(lot_id, n) for n in range(1, total + 1)]
        else:
            if not isinstance(raw_spots, list):
                raise CatalogError(f"Lot {lot_id}: spots must be a list")
            spots = []
            for raw in raw_spots:
                if not isinstance(raw, dict):
                    raise CatalogError(f"Lot {lot_id}: spot entry must be an object, got {raw!r}")
                owner = str(raw.get("lot", lot_id))
                if owner != lot_id:
                    raise CatalogError(f"Spot {raw.get('id')} is listed under lot {lot_id} but names lot {owner}")
                number = whole_number(raw.get("number"))
                if number is None:
                    raise CatalogError(f"Lot {lot_id}: spot {raw.get('id')!r} has no valid number")
                spots.append(Spot(lot_id, number, blocked=_truthy(raw.get("taken", False))))
            if not spots:
                raise CatalogError(f"Lot {lot_id}: spot count must be positive")
            total = entry.get("totalSpots")
            if total is not None and total != len(spots):
                logger.warning("Lot %s declares %s spots but lists %d", lot_id, total, len(spots))

        lots[lot_id] = _build_lot(lot_id, name, spots)

    catalog = Catalog(lots=lots)
    logger.info("Catalog loaded: %d lots, %d spots", len(lots), catalog.total_spots)
    return catalog


def parse_catalog_df(df: pd.DataFrame) -> Catalog:
    """Convert a catalog DataFrame (one row per spot) into a Catalog."""
    result = validate_catalog_df(df)
    if not result.is_valid:
        raise CatalogError("; ".join(result.errors))
    for w in result.warnings:
        logger.warning(w)

    names: Dict[str, str] = {}
    spots: Dict[str, List[Spot]] = {}
    for _, row in df.iterrows():
        lot_id = str(row["Lot ID"]).strip()
        names.setdefault(lot_id, str(row["Lot Name"]).strip())
        blocked = "Blocked" in df.columns and _truthy(row.get("Blocked"))
        spots.setdefault(lot_id, []).append(Spot(lot_id, int(row["Spot Number"]), blocked=blocked))

    catalog = Catalog(lots={lid: _build_lot(lid, names[lid], s) for lid, s in spots.items()})
    logger.info("Catalog loaded: %d lots, %d spots", len(catalog.lots), catalog.total_spots)
    return catalog


def load_catalog(path: str) -> Catalog:
    """Load the catalog from a JSON, CSV or XLSX file on disk."""
    if not os.path.exists(path):
        raise CatalogError(f"Catalog file not found: {path}")
    lower = path.lower()
    if lower.endswith(".json"):
        with open(path, encoding="utf-8") as fh:
            try:
                document = json.load(fh)
            except json.JSONDecodeError as e:
                raise CatalogError(f"Catalog file is not valid JSON: {e}") from e
        return load_catalog_json(document)
    if lower.endswith(".csv"):
        return parse_catalog_df(pd.read_csv(path))
    if lower.endswith(".xlsx") or lower.endswith(".xls"):
        return parse_catalog_df(pd.read_excel(path, engine="openpyxl"))
    raise CatalogError(f"Unsupported catalog format: {path}")
