"""
Institution pattern loader.
Loads CSV files containing per-institution extraction rules.
"""

import csv
from typing import Dict, List
from pathlib import Path


PATTERN_COLUMNS = ("expense", "income", "transfer")


def load_institutions_csv(csv_path: str) -> List[Dict]:
    """
    Load institution seed dicts from a CSV file.

    Args:
        csv_path: Path to CSV file containing institution rules

    Returns:
        List of seed dicts in file order, suitable for
        PatternRegistry.from_dicts()

    Example CSV format:
        name,identifier,account_label,expense,income,transfer
        Fineco,fineco,Fineco,"(?i)pagamento.*?([\\d.,]+).*?presso\\s+(.+)",,
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"Institution pattern file not found: {csv_path}")

    institutions = []
    with open(csv_file, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            name = (row.get('name') or '').strip()
            if not name:
                continue

            entry = {
                'name': name,
                'identifier': (row.get('identifier') or '').strip(),
                'account_label': (row.get('account_label') or '').strip() or name,
            }
            for column in PATTERN_COLUMNS:
                pattern = (row.get(column) or '').strip()
                entry[column] = pattern or None

            institutions.append(entry)

    return institutions
