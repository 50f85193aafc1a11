# src/acstep/reference.py
"""
Brute-force reference matcher, used to cross-check the automaton.

Relies on the 'regex' module's overlapped search so every occurrence,
including self-overlapping ones like "aa" in "aaa", is found.
"""

from typing import Iterable, List, Set, Tuple

import regex


def brute_force_matches(patterns: Iterable[str], text: str) -> Set[Tuple[int, int, int]]:
    """
    Return {(pattern_index, start, end)} with end inclusive.
    Pattern indices follow first occurrence, like the automaton's own indexing.
    """
    found = set()
    for idx, pattern in enumerate(_unique(patterns)):
        for m in regex.finditer(regex.escape(pattern), text, overlapped=True):
            found.add((idx, m.start(), m.end() - 1))
    return found


def _unique(patterns: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for p in patterns:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out
