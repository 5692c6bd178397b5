import heapq
import itertools
import logging
from enum import Enum

from errors import MovementInPastError, whole_number

logger = logging.getLogger(__name__)


class MovementDirection(Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"


class Movement:
    def __init__(self, time, direction):
        time = whole_number(time, "Movement time")
        if time < 0:
            raise ValueError(f"Movement time must be >= 0, got {time}")
        self._time = time              # Simulated minute the movement fires at
        self._direction = MovementDirection(direction)

    @property
    def time(self):
        return self._time

    @property
    def direction(self):
        return self._direction

    def __repr__(self):
        return f"{type(self).__name__}(time={self.time}, direction={self.direction.value})"


class ShipMovement(Movement):
    def __init__(self, time, direction, ship):
        super().__init__(time, direction)
        self._ship = ship

    @property
    def ship(self):
        return self._ship

    def __repr__(self):
        return (f"ShipMovement(time={self.time}, direction={self.direction.value}, "
                f"ship={self.ship.imo_number})")


class CargoMovement(Movement):
    def __init__(self, time, direction, cargo):
        super().__init__(time, direction)
        self._cargo = list(cargo)

    @property
    def cargo(self):
        return list(self._cargo)

    def __repr__(self):
        return (f"CargoMovement(time={self.time}, direction={self.direction.value}, "
                f"cargo={len(self._cargo)})")


class MovementQueue:
    """
    Pending movements ordered by action time.

    Entries are heap items of (time, sequence, movement). The sequence number
    breaks ties in insertion order so the processing order of simultaneous
    movements is the same on every run.
    """

    def __init__(self, current_time=0):
        self._heap = []
        self._counter = itertools.count()
        self.current_time = current_time

    def add(self, movement):
        if movement.time < self.current_time:
            raise MovementInPastError(movement.time, self.current_time)
        heapq.heappush(self._heap, (movement.time, next(self._counter), movement))

    def peek_time(self):
        return self._heap[0][0] if self._heap else None

    def pop_due(self, now):
        """
        Removes and returns every movement whose time equals ``now``.

        Anything left behind with an earlier time can never run again (for
        example a movement added at the current minute after that minute's
        tick already happened). Those are dropped with a warning.
        """
        self.current_time = now
        due = []
        while self._heap and self._heap[0][0] <= now:
            time, _, movement = heapq.heappop(self._heap)
            if time < now:
                logger.warning("Discarding stale movement %r at minute %d", movement, now)
                continue
            due.append(movement)
        return due

    def __len__(self):
        return len(self._heap)

    def __iter__(self):
        return iter([movement for _, _, movement in sorted(self._heap)])
