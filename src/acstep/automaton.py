# src/acstep/automaton.py
"""
Aho-Corasick automaton builder (pure Python).
API:
    build_automaton(patterns) -> Automaton
    Automaton.from_patterns(patterns)
    Automaton.find_all(text) -> list of MatchEvent (end inclusive)
Notes:
- States are addressed by integer id, 0 is the root.
- The automaton is read-only once built; scanners only hold a cursor on it.
- Output links are precomputed so scanning never walks the failure chain
  just to collect matches.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ROOT = 0


class InvalidPatternError(ValueError):
    """Raised when a pattern cannot be added to the automaton."""

    def __init__(self, message: str, pattern: Any = None, index: Optional[int] = None):
        super().__init__(message)
        self.pattern = pattern
        self.index = index


class _Node:
    __slots__ = ("next", "fail", "output", "depth")

    def __init__(self, depth: int = 0):
        # transitions: symbol -> state id
        self.next: Dict[str, int] = {}
        self.fail: int = ROOT
        # indices of patterns ending exactly here
        self.output: List[int] = []
        self.depth = depth


@dataclass(frozen=True)
class State:
    id: int
    depth: int
    # read-only view, the automaton is shared between cursors
    transitions: Mapping[str, int] = field(hash=False)
    ended_patterns: Tuple[int, ...]
    fail: int
    # terminal states on the failure chain, nearest first
    output_links: Tuple[int, ...] = field(default=())

    @property
    def is_terminal(self) -> bool:
        return bool(self.ended_patterns)

    @property
    def is_root(self) -> bool:
        return self.id == ROOT


class Automaton:
    def __init__(self, patterns: Tuple[str, ...], states: Tuple[State, ...]):
        self._patterns = patterns
        self._states = states

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "Automaton":
        return build_automaton(patterns)

    @property
    def root(self) -> State:
        return self._states[ROOT]

    @property
    def patterns(self) -> Tuple[str, ...]:
        """Patterns in insertion order, duplicates collapsed."""
        return self._patterns

    @property
    def states(self) -> Tuple[State, ...]:
        return self._states

    @property
    def alphabet(self) -> frozenset:
        return frozenset(sym for s in self._states for sym in s.transitions)

    def __len__(self) -> int:
        return len(self._states)

    def state(self, state_id: int) -> State:
        return self._states[state_id]

    def pattern(self, index: int) -> str:
        return self._patterns[index]

    def goto(self, state_id: int, symbol: str) -> Optional[int]:
        return self._states[state_id].transitions.get(symbol)

    def iter_bfs(self) -> Iterator[State]:
        """Yield states breadth-first from the root, children in symbol order."""
        queue = deque([ROOT])
        while queue:
            state = self._states[queue.popleft()]
            yield state
            for _, child in sorted(state.transitions.items()):
                queue.append(child)

    def structure(self) -> Dict[str, Any]:
        """Plain-data snapshot of the goto/fail/output tables."""
        return {
            "patterns": list(self._patterns),
            "states": [
                {
                    "id": s.id,
                    "depth": s.depth,
                    "transitions": dict(s.transitions),
                    "ended_patterns": list(s.ended_patterns),
                    "fail": s.fail,
                    "output_links": list(s.output_links),
                }
                for s in self._states
            ],
        }

    def iter(self, text: str):
        from acstep.scanner import iter_matches
        return iter_matches(self, text)

    def find_all(self, text: str):
        """Convenience: return a list of MatchEvent."""
        return list(self.iter(text))

    def __repr__(self) -> str:
        return f"Automaton(patterns={len(self._patterns)}, states={len(self._states)})"


def _validate(patterns: Iterable[str]) -> List[str]:
    checked = []
    for idx, pattern in enumerate(patterns):
        if not isinstance(pattern, str):
            raise InvalidPatternError(
                f"Pattern #{idx} must be a string, got {type(pattern).__name__}",
                pattern=pattern, index=idx)
        if not pattern:
            raise InvalidPatternError(
                f"Pattern #{idx} is empty; empty patterns are not supported",
                pattern=pattern, index=idx)
        checked.append(pattern)
    return checked


def build_automaton(patterns: Iterable[str]) -> Automaton:
    """
    Build the goto, failure and output tables for the given patterns.

    All patterns are validated before any state is created, so a bad pattern
    never leaves a half-built automaton behind.
    """
    checked = _validate(patterns)

    nodes: List[_Node] = [_Node()]
    kept: List[str] = []
    seen: Dict[str, int] = {}

    # 1. trie
    for pattern in checked:
        if pattern in seen:
            logger.debug("Duplicate pattern %r collapsed onto #%d", pattern, seen[pattern])
            continue
        cur = ROOT
        for ch in pattern:
            nxt = nodes[cur].next.get(ch)
            if nxt is None:
                nxt = len(nodes)
                nodes.append(_Node(nodes[cur].depth + 1))
                nodes[cur].next[ch] = nxt
            cur = nxt
        seen[pattern] = len(kept)
        nodes[cur].output.append(len(kept))
        kept.append(pattern)

    # 2. failure links, BFS so every fail target is final before use
    order: List[int] = []
    queue = deque()
    for child in nodes[ROOT].next.values():
        nodes[child].fail = ROOT
        queue.append(child)

    while queue:
        current = queue.popleft()
        order.append(current)
        for ch, child in nodes[current].next.items():
            queue.append(child)
            f = nodes[current].fail
            while ch not in nodes[f].next and f != ROOT:
                f = nodes[f].fail
            target = nodes[f].next.get(ch)
            nodes[child].fail = target if target is not None and target != child else ROOT

    # 3. output links, reusing the fail target's already computed set
    output_links: Dict[int, Tuple[int, ...]] = {ROOT: ()}
    for sid in order:
        f = nodes[sid].fail
        inherited = output_links[f]
        output_links[sid] = ((f,) + inherited) if nodes[f].output else inherited

    states = tuple(
        State(
            id=sid,
            depth=node.depth,
            transitions=MappingProxyType(dict(node.next)),
            ended_patterns=tuple(node.output),
            fail=node.fail,
            output_links=output_links.get(sid, ()),
        )
        for sid, node in enumerate(nodes)
    )
    automaton = Automaton(tuple(kept), states)
    logger.info("Built Aho-Corasick automaton: %d patterns, %d states", len(kept), len(states))
    return automaton
