"""Word-level diff rendering for audit views."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import List

_WHITESPACE = re.compile(r"\s+")

DELETED_TEMPLATE = '<del class="diff-removed">{}</del>'
INSERTED_TEMPLATE = '<ins class="diff-added">{}</ins>'


@dataclass(slots=True)
class DiffResult:
    before: str
    after: str


def split_words(text: str) -> List[str]:
    text = text.strip()
    if not text:
        return []
    return _WHITESPACE.split(text)


def longest_common_subsequence(old: List[str], new: List[str]) -> List[str]:
    """
    One longest common subsequence of two word lists.

    The table is ``(len(old) + 1) x (len(new) + 1)``, so memory grows with the
    product of both lengths; fine for summaries of a few hundred words.
    On ties the walk advances through ``old`` first, which fixes which of
    several equally long subsequences is returned.
    """
    n, m = len(old), len(new)
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(m - 1, -1, -1):
            if old[i] == new[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    lcs: List[str] = []
    i = j = 0
    while i < n and j < m:
        if old[i] == new[j]:
            lcs.append(old[i])
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            i += 1
        else:
            j += 1
    return lcs


def word_diff(old_text: str, new_text: str) -> DiffResult:
    """Render removed words in ``before`` and inserted words in ``after``."""
    old = split_words(old_text)
    new = split_words(new_text)
    lcs = longest_common_subsequence(old, new)

    before: List[str] = []
    after: List[str] = []
    i_old = i_new = i_lcs = 0

    while i_old < len(old) or i_new < len(new):
        in_lcs = i_lcs < len(lcs)
        if (
            in_lcs
            and i_old < len(old)
            and i_new < len(new)
            and old[i_old] == lcs[i_lcs]
            and new[i_new] == lcs[i_lcs]
        ):
            word = html.escape(old[i_old])
            before.append(word)
            after.append(word)
            i_old += 1
            i_new += 1
            i_lcs += 1
            continue

        if i_old < len(old) and (not in_lcs or old[i_old] != lcs[i_lcs]):
            before.append(DELETED_TEMPLATE.format(html.escape(old[i_old])))
            i_old += 1
        if i_new < len(new) and (not in_lcs or new[i_new] != lcs[i_lcs]):
            after.append(INSERTED_TEMPLATE.format(html.escape(new[i_new])))
            i_new += 1

    return DiffResult(before=" ".join(before), after=" ".join(after))
