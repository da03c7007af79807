"""Parser for tab-delimited query output with a header row."""

from typing import Dict, List


def parse_tabular_output(text: str) -> List[Dict[str, str]]:
    """
    Parse tab-delimited text into a list of row mappings.

    The first non-empty line is the header. Every following non-empty line
    becomes one row keyed by header name. Short rows are padded with empty
    strings, and header positions with a blank name are skipped. Values are
    returned as trimmed strings; no type conversion is performed.

    Input that has no header or no data lines yields an empty list.

    Args:
        text: Raw output, e.g. from ``mysql --batch``

    Returns:
        List of dictionaries mapping field name to value, in input order

    Example:
        >>> parse_tabular_output("A\\tB\\n1\\t2\\n3")
        [{'A': '1', 'B': '2'}, {'A': '3', 'B': ''}]
    """
    lines = [line.rstrip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        return []

    headers = [name.strip() for name in lines[0].split("\t")]

    rows: List[Dict[str, str]] = []
    for line in lines[1:]:
        cells = line.split("\t")
        row: Dict[str, str] = {}
        for index, name in enumerate(headers):
            if not name:
                continue
            row[name] = cells[index].strip() if index < len(cells) else ""
        rows.append(row)

    return rows


def row_value(row: Dict[str, str], key: str) -> str:
    """Return a trimmed field value, or an empty string if the field is absent."""
    return (row.get(key) or "").strip()
