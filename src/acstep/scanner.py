# src/acstep/scanner.py

"""
Stream scanner over a built Automaton.

A ScanCursor holds the only mutable scan state (current state id and text
position). It consumes one symbol at a time, so the same code drives the
batch helpers below, chunked streaming via feed(), and the StepController.

Match offsets are inclusive on both ends: text[start:end + 1] == pattern.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from acstep.automaton import ROOT, Automaton

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchEvent:
    pattern_index: int
    pattern: str
    start: int
    end: int  # inclusive

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern_index": self.pattern_index,
            "pattern": self.pattern,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class Transition:
    """Everything that happened while consuming one symbol."""
    symbol: str
    position: int
    source: int
    target: int
    # states visited through failure links, in hop order
    fail_path: Tuple[int, ...]
    matches: Tuple[MatchEvent, ...]

    @property
    def failed(self) -> bool:
        return bool(self.fail_path)


class ScanCursor:
    def __init__(self, automaton: Automaton):
        self.automaton = automaton
        self.state = ROOT
        self.position = 0

    def reset(self) -> None:
        self.state = ROOT
        self.position = 0

    def consume(self, symbol: str) -> Transition:
        ac = self.automaton
        source = self.state
        node = ac.state(source)
        hops = []

        # follow failure links until a transition on symbol exists or we hit root
        while symbol not in node.transitions and node.id != ROOT:
            node = ac.state(node.fail)
            hops.append(node.id)

        nxt = node.transitions.get(symbol)
        target = nxt if nxt is not None else ROOT

        matches = self._collect(target, self.position)
        transition = Transition(
            symbol=symbol,
            position=self.position,
            source=source,
            target=target,
            fail_path=tuple(hops),
            matches=matches,
        )
        self.state = target
        self.position += 1
        return transition

    def _collect(self, state_id: int, position: int) -> Tuple[MatchEvent, ...]:
        ac = self.automaton
        state = ac.state(state_id)
        found = []
        # own patterns first, then every terminal on the failure chain
        for sid in (state_id,) + state.output_links:
            for pat_idx in ac.state(sid).ended_patterns:
                pat = ac.pattern(pat_idx)
                found.append(MatchEvent(pat_idx, pat, position - len(pat) + 1, position))
        return tuple(found)

    def feed(self, chunk: Iterable[str]) -> List[MatchEvent]:
        """
        Consume a chunk of a longer stream. Offsets continue from the previous
        chunk, so matches spanning a chunk boundary are reported normally.
        """
        out: List[MatchEvent] = []
        for symbol in chunk:
            out.extend(self.consume(symbol).matches)
        return out


def iter_matches(automaton: Automaton, text: Iterable[str]) -> Iterator[MatchEvent]:
    """
    Iterate over all matches in text.
    Yields MatchEvent in order of end offset; for equal ends, longest first.
    """
    cursor = ScanCursor(automaton)
    for symbol in text:
        for match in cursor.consume(symbol).matches:
            yield match


def find_all(automaton: Automaton, text: Iterable[str]) -> List[MatchEvent]:
    matches = list(iter_matches(automaton, text))
    logger.debug("Scan finished: %d matches", len(matches))
    return matches
