"""Divides a search result set into contiguous windows."""

from typing import List

from marklogic_plugin.domain.entities.document import DocumentSplit


def plan_splits(total: int, max_splits: int) -> List[DocumentSplit]:
    """
    Cut ``total`` results into ``min(max_splits, total)`` windows.

    Window lengths differ by at most one, longer windows first. No results
    means no splits.
    """
    if total <= 0:
        return []
    count = max(1, min(max_splits, total))
    size, remainder = divmod(total, count)

    splits: List[DocumentSplit] = []
    start = 1
    for index in range(count):
        length = size + 1 if index < remainder else size
        splits.append(DocumentSplit(start=start, length=length))
        start += length
    return splits
