from typing import Dict, List, Tuple
from engine.model import Event

class EventLog:
    """Append-only combat event storage, pageable by offset or by round."""

    def __init__(self):
        self._log: List[Event] = []
        self._by_round: Dict[int, List[int]] = {}

    def append_many(self, evts: List[Event]) -> Tuple[int, int]:
        """Append events and return (start_offset, end_offset)."""
        start = len(self._log)
        for i, e in enumerate(evts, start):
            self._by_round.setdefault(e.round, []).append(i)
        self._log.extend(evts)
        return start, len(self._log) - 1

    def since(self, offset: int, limit: int = 1000) -> Tuple[List[Event], int]:
        """Up to limit combat events from offset on, plus the offset to resume from."""
        start = max(0, offset)
        page = self._log[start:start + limit]
        return page, start + len(page)

    def in_round(self, rnd: int) -> List[Event]:
        """Events of round `rnd`, counting the first round as 0."""
        return [self._log[i] for i in self._by_round.get(rnd, [])]

    def __len__(self) -> int:
        return len(self._log)
