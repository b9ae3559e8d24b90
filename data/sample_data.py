"""Generate the sample two-lot catalog in JSON, CSV and Excel form."""

import json
import os

import pandas as pd

from config.defaults import SAMPLE_LOTS


def generate_catalog_document(lots: dict = None) -> dict:
    """Catalog document in the ``parkingLots`` shape, every spot listed."""
    lots = lots or SAMPLE_LOTS
    document = {"parkingLots": {}}
    for lot_id, (name, total) in lots.items():
        document["parkingLots"][lot_id] = {
            "name": name,
            "totalSpots": total,
            "spots": [
                {"id": f"{lot_id}-{n}", "lot": lot_id, "number": n, "taken": False}
                for n in range(1, total + 1)
            ],
        }
    return document


def generate_catalog_df(lots: dict = None) -> pd.DataFrame:
    """One row per spot."""
    lots = lots or SAMPLE_LOTS
    rows = []
    for lot_id, (name, total) in lots.items():
        for n in range(1, total + 1):
            rows.append({
                "Lot ID": lot_id,
                "Lot Name": name,
                "Spot Number": n,
                "Blocked": False,
            })
    return pd.DataFrame(rows)


def generate_sample_files(output_dir: str):
    """Write the sample catalog as parkingData.json, catalog.csv and catalog.xlsx."""
    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, "parkingData.json"), "w", encoding="utf-8") as fh:
        json.dump(generate_catalog_document(), fh, indent=2)
    df = generate_catalog_df()
    df.to_csv(os.path.join(output_dir, "catalog.csv"), index=False)
    with pd.ExcelWriter(os.path.join(output_dir, "catalog.xlsx"), engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Spots", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_files(out)
    print("Sample catalog files generated in sample_files/")
