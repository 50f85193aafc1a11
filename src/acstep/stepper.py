# src/acstep/stepper.py

"""
Step controller: drives a ScanCursor over a fixed text one symbol per call,
so a renderer can animate each transition.

States:
    READY     -> nothing consumed yet
    SCANNING  -> at least one symbol consumed, text not exhausted
    COMPLETE  -> text exhausted; advance_one_symbol() is a no-op until reset()
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple, Union

from acstep.automaton import Automaton
from acstep.scanner import MatchEvent, ScanCursor

logger = logging.getLogger(__name__)


class ScanStatus(enum.Enum):
    READY = "ready"
    SCANNING = "scanning"
    COMPLETE = "complete"


# terminal status returned once the text is exhausted
SCAN_COMPLETE = ScanStatus.COMPLETE


@dataclass(frozen=True)
class Step:
    symbol: str
    position: int
    source: int
    state: int
    failed: bool
    fail_path: Tuple[int, ...]
    matches: Tuple[MatchEvent, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "position": self.position,
            "source": self.source,
            "state": self.state,
            "failed": self.failed,
            "fail_path": list(self.fail_path),
            "matches": [m.to_dict() for m in self.matches],
        }


class StepController:
    def __init__(self, automaton: Automaton, text: str):
        self.automaton = automaton
        self.text = text
        self._cursor = ScanCursor(automaton)
        self._status = ScanStatus.READY
        self._history: List[Step] = []

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def position(self) -> int:
        return self._cursor.position

    @property
    def state(self) -> int:
        return self._cursor.state

    @property
    def history(self) -> List[Step]:
        return list(self._history)

    @property
    def matches(self) -> List[MatchEvent]:
        """All matches emitted so far, in emission order."""
        return [m for step in self._history for m in step.matches]

    def advance_one_symbol(self) -> Union[Step, ScanStatus]:
        """
        Consume the next symbol and return the Step describing it.
        Returns ScanStatus.COMPLETE, without touching any state, once the text
        is exhausted.
        """
        if self._status is ScanStatus.COMPLETE:
            return SCAN_COMPLETE
        if self._cursor.position >= len(self.text):
            # empty text: nothing to consume
            self._status = ScanStatus.COMPLETE
            return SCAN_COMPLETE

        t = self._cursor.consume(self.text[self._cursor.position])
        step = Step(
            symbol=t.symbol,
            position=t.position,
            source=t.source,
            state=t.target,
            failed=t.failed,
            fail_path=t.fail_path,
            matches=t.matches,
        )
        self._history.append(step)
        self._status = (ScanStatus.COMPLETE if self._cursor.position >= len(self.text)
                        else ScanStatus.SCANNING)
        logger.debug("step %d %r: %d -> %d fail=%s matches=%d",
                     step.position, step.symbol, step.source, step.state,
                     list(step.fail_path), len(step.matches))
        return step

    def reset(self) -> None:
        self._cursor.reset()
        self._history.clear()
        self._status = ScanStatus.READY

    def __iter__(self) -> Iterator[Step]:
        while True:
            step = self.advance_one_symbol()
            if step is SCAN_COMPLETE:
                return
            yield step

    def run(self) -> List[Step]:
        """Drain the remaining text and return the steps taken."""
        return list(self)

    def snapshot(self) -> Dict[str, Any]:
        last = self._history[-1] if self._history else None
        return {
            "text": self.text,
            "position": self.position,
            "state": self.state,
            "status": self._status.value,
            "last_step": last.to_dict() if last else None,
            "matches": [m.to_dict() for m in self.matches],
        }
