"""
Record identifier allocation
"""
from typing import Any, Dict, List


def next_id(records: List[Dict[str, Any]]) -> int:
    """
    Next integer id for a collection: 1 when empty, otherwise max + 1

    No counter is persisted, so the result only depends on the records that
    are still present.
    """
    if not records:
        return 1
    return max(record["id"] for record in records) + 1
