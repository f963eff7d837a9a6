#!/usr/bin/env python3
"""
Merge and clean raw wildfire CSVs for training.

Keeps FIRE_SIZE, LATITUDE, LONGITUDE, FIRE_YEAR, DISCOVERY_DOY, drops rows
missing any of them or outside plausible ranges, removes exact repeats, and
writes one file named by the year range:
    fire_records_YYYY_YYYY.csv
"""

import argparse
from pathlib import Path

import pandas as pd

from hazardcast.data.records import FIRE_SOURCE_COLUMNS


def clean_fire_table(merged, min_year=None, max_year=None):
    """Coerce, range-filter and de-duplicate a merged raw fire table."""
    required = list(FIRE_SOURCE_COLUMNS)
    missing = [c for c in required if c not in merged.columns]
    if missing:
        raise SystemExit(f"Missing required columns: {missing}")

    merged = merged[required].copy()
    for col in required:
        merged[col] = pd.to_numeric(merged[col], errors="coerce")
    merged = merged.dropna(subset=required)

    # Basic coordinate / calendar sanity filter.
    merged = merged[
        merged["LONGITUDE"].between(-180, 180, inclusive="both")
        & merged["LATITUDE"].between(-90, 90, inclusive="both")
        & merged["DISCOVERY_DOY"].between(1, 366, inclusive="both")
        & (merged["FIRE_SIZE"] >= 0)
    ].copy()
    if min_year is not None:
        merged = merged[merged["FIRE_YEAR"] >= min_year]
    if max_year is not None:
        merged = merged[merged["FIRE_YEAR"] <= max_year]

    merged["FIRE_YEAR"] = merged["FIRE_YEAR"].astype(int)
    merged["DISCOVERY_DOY"] = merged["DISCOVERY_DOY"].astype(int)
    return merged.drop_duplicates(subset=required).reset_index(drop=True)


def main():
    parser = argparse.ArgumentParser(description="Prepare merged wildfire records for training")
    parser.add_argument("--input-dir", default="data/fires", help="Directory containing raw fire CSV files")
    parser.add_argument("--output-dir", default="data", help="Directory for merged output")
    parser.add_argument("--min-year", type=int, default=None, help="Earliest FIRE_YEAR to keep")
    parser.add_argument("--max-year", type=int, default=None, help="Latest FIRE_YEAR to keep")
    args = parser.parse_args()

    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(input_dir.glob("*.csv"))
    if not files:
        raise SystemExit(f"No CSV files found in {input_dir}")

    frames = []
    for f in files:
        df = pd.read_csv(f, low_memory=False)
        # Handle BOM if present.
        df.columns = [c.lstrip("\ufeff") for c in df.columns]
        frames.append(df)

    merged = pd.concat(frames, ignore_index=True)
    before_rows = len(merged)
    cleaned = clean_fire_table(merged, args.min_year, args.max_year)

    if cleaned.empty:
        raise SystemExit("Merged dataset is empty after preprocessing.")

    start = int(cleaned["FIRE_YEAR"].min())
    end = int(cleaned["FIRE_YEAR"].max())
    out_path = output_dir / f"fire_records_{start}_{end}.csv"
    cleaned.to_csv(out_path, index=False)

    print(f"Input files: {len(files)}")
    print(f"Rows before: {before_rows}")
    print(f"Rows after:  {len(cleaned)}")
    print(f"Year range:  {start} -> {end}")
    print(f"Output:      {out_path}")


if __name__ == "__main__":
    main()
