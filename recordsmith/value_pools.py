import csv
from pathlib import Path
from typing import Dict, List, Tuple

_ROW_CACHE: Dict[str, List[Tuple[str, ...]]] = {}
_GROUP_CACHE: Dict[Tuple[str, int, Tuple[int, ...]], Dict[Tuple[str, ...], List[str]]] = {}


def load_csv_rows(path: str, *, skip_header: bool = True) -> List[Tuple[str, ...]]:
    """Read every non-blank row of a UTF-8 CSV file once, stripping each cell."""
    key = str(path)
    if key in _ROW_CACHE:
        return _ROW_CACHE[key]

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"CSV not found: {path}")

    rows: List[Tuple[str, ...]] = []
    with p.open("r", newline="", encoding="utf-8") as f:
        r = csv.reader(f)
        if skip_header:
            next(r, None)
        for row in r:
            cells = tuple(cell.strip() for cell in row)
            if any(cells):
                rows.append(cells)

    if not rows:
        raise ValueError(f"No rows loaded from CSV {path}")

    _ROW_CACHE[key] = rows
    return rows


def load_csv_column(path: str, column_index: int, *, skip_header: bool = True) -> List[str]:
    values = [
        row[column_index]
        for row in load_csv_rows(path, skip_header=skip_header)
        if column_index < len(row) and row[column_index]
    ]
    if not values:
        raise ValueError(f"No values loaded from CSV {path} column {column_index}")
    return values


def load_csv_column_by_match(
    path: str,
    column_index: int,
    match_column_indexes: Tuple[int, ...],
    *,
    skip_header: bool = True,
) -> Dict[Tuple[str, ...], List[str]]:
    """Group one column's values by the tuple of values found in the match columns."""
    key = (str(path), column_index, tuple(match_column_indexes))
    if key in _GROUP_CACHE:
        return _GROUP_CACHE[key]

    values_by_match: Dict[Tuple[str, ...], List[str]] = {}
    for row in load_csv_rows(path, skip_header=skip_header):
        if column_index >= len(row) or any(i >= len(row) for i in match_column_indexes):
            continue
        value = row[column_index]
        if value == "":
            continue
        match_value = tuple(row[i] for i in match_column_indexes)
        values_by_match.setdefault(match_value, []).append(value)

    if not values_by_match:
        raise ValueError(
            f"No values loaded from CSV {path} with column_index={column_index} "
            f"and match_column_indexes={match_column_indexes}"
        )

    _GROUP_CACHE[key] = values_by_match
    return values_by_match


def clear_cache() -> None:
    _ROW_CACHE.clear()
    _GROUP_CACHE.clear()
