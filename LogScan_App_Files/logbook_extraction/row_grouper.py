"""
Row Grouper - Cluster OCR lines/words into logbook table rows

Items are anything with `left` / `top` coordinates (OcrLine, OcrWord).
"""

from typing import List, Sequence, TypeVar


# Vertical distance (same units as the OCR bounding boxes) within which two
# items are considered to sit on the same logbook row.
ROW_TOLERANCE = 20.0

T = TypeVar("T")


def group_lines_by_row(items: Sequence[T], tolerance: float = ROW_TOLERANCE) -> List[List[T]]:
    """
    Group items into rows by top-y, each row ordered left to right.

    Single greedy pass: items are visited top to bottom and join the first row
    whose first (top-most) member is less than `tolerance` away vertically.
    Items without geometry are skipped.

    Args:
        items: OCR lines or words
        tolerance: Max top-y distance to be considered the same row

    Returns:
        Rows ordered top to bottom
    """
    placed = [it for it in items if getattr(it, 'top', None) is not None
              and getattr(it, 'left', None) is not None]
    sorted_items = sorted(placed, key=lambda it: it.top)

    rows: List[List[T]] = []
    for item in sorted_items:
        for row in rows:
            if abs(item.top - row[0].top) < tolerance:
                row.append(item)
                break
        else:
            rows.append([item])

    for row in rows:
        row.sort(key=lambda it: it.left)

    return rows
