# campsite/editor/diff.py
"""
Line-level diff used by the revision history viewer.

Classic longest-common-subsequence table over the two line lists, then a
backtrack from the bottom-right corner. Quadratic in time and space, which is
fine for snapshots of a single section.
"""
from typing import Iterable, List, NamedTuple

SAME = "same"
ADD = "add"
REMOVE = "remove"

_PREFIX = {SAME: " ", ADD: "+", REMOVE: "-"}


class DiffLine(NamedTuple):
    kind: str
    text: str


def _lcs_table(a: List[str], b: List[str]) -> List[List[int]]:
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])
    return table


def diff_lines(before: str, after: str) -> List[DiffLine]:
    a = before.split("\n")
    b = after.split("\n")
    table = _lcs_table(a, b)

    result: List[DiffLine] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            result.append(DiffLine(SAME, a[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i][j - 1] >= table[i - 1][j]):
            result.append(DiffLine(ADD, b[j - 1]))
            j -= 1
        else:
            result.append(DiffLine(REMOVE, a[i - 1]))
            i -= 1

    result.reverse()
    return result


def render_diff(lines: Iterable[DiffLine]) -> List[str]:
    return [f"{_PREFIX[line.kind]} {line.text}" for line in lines]
