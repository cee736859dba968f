"""
Import flashcards from a CSV file.

The CSV needs `dutch` and `english` columns (or `front` and `back`);
an optional `image_url` column is kept as the hint image. Rows whose
(front, back) pair already exists are skipped, so re-running the import
is safe.

Usage:
    python -m scripts.data.import_cards data/word_list.csv
    python -m scripts.data.import_cards data/word_list.csv --dry-run
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from core import srs
from core.settings import get_log_level

FRONT_COLUMNS = ("front", "dutch")
BACK_COLUMNS = ("back", "english")


def normalize(s: pd.Series) -> pd.Series:
    s = s.fillna("").astype(str).str.strip()
    # collapse multiple spaces
    return s.str.replace(r"\s+", " ", regex=True)


def _pick_column(df: pd.DataFrame, candidates: tuple[str, ...]) -> str:
    for name in candidates:
        if name in df.columns:
            return name
    raise ValueError(f"CSV must contain one of {list(candidates)}. Found: {list(df.columns)}")


def load_pairs(path: Path) -> pd.DataFrame:
    """
    Read the CSV into a frame with front, back, image_url columns.
    """
    df = pd.read_csv(path)
    front_col = _pick_column(df, FRONT_COLUMNS)
    back_col = _pick_column(df, BACK_COLUMNS)

    pairs = pd.DataFrame({
        "front": normalize(df[front_col]),
        "back": normalize(df[back_col]),
        "image_url": df["image_url"] if "image_url" in df.columns else None,
    })
    pairs = pairs[(pairs["front"] != "") & (pairs["back"] != "")]
    return pairs.drop_duplicates(subset=["front", "back"])


def main() -> None:
    parser = argparse.ArgumentParser(description="Import flashcards from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV with dutch/english columns")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be added")
    args = parser.parse_args()

    logging.basicConfig(level=get_log_level())

    if not args.csv_path.exists():
        raise FileNotFoundError(f"Missing file: {args.csv_path}")

    srs.init_db()
    store = srs.SqlCardStore()
    existing = {(card.front, card.back) for card in store.load_cards()}

    pairs = load_pairs(args.csv_path)
    to_add = [
        row for row in pairs.itertuples(index=False)
        if (row.front, row.back) not in existing
    ]

    print(f"CSV rows (deduped): {len(pairs)}")
    print(f"Already present:    {len(pairs) - len(to_add)}")
    print(f"To add:             {len(to_add)}")

    if args.dry_run:
        for row in to_add[:20]:
            print(f"  + {row.front} -> {row.back}")
        return

    for row in to_add:
        image_url = row.image_url if isinstance(row.image_url, str) and row.image_url else None
        store.add_card(row.front, row.back, image_url=image_url)

    print(f"✓ Added {len(to_add)} cards")


if __name__ == "__main__":
    main()
