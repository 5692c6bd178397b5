from collections import Counter, deque

import numpy as np

from cargo import BulkCargo, BulkCargoType, Container, ContainerType
from movement import CargoMovement, MovementDirection, ShipMovement
from ship_manager import NauticalFlag


class StatisticsEvaluator:
    """
    Base class for everything the port reports statistics to.

    The port only ever calls ``on_process_movement`` and ``on_elapse_minute``
    and reads ``current_time``; subclasses keep their own counters.
    """

    def __init__(self):
        self._time = 0

    @property
    def current_time(self):
        return self._time

    def on_elapse_minute(self):
        self._time += 1

    def on_process_movement(self, movement):
        pass


class ShipThroughputEvaluator(StatisticsEvaluator):
    """Counts ships that left the port during the last hour."""

    WINDOW_MINUTES = 60

    def __init__(self):
        super().__init__()
        self._departures = deque()          # Evaluator minutes of OUTBOUND ship movements

    @property
    def throughput_per_hour(self):
        return len(self._departures)

    def on_process_movement(self, movement):
        if isinstance(movement, ShipMovement) and movement.direction is MovementDirection.OUTBOUND:
            self._departures.append(self._time)

    def on_elapse_minute(self):
        super().on_elapse_minute()
        while self._departures and self._time - self._departures[0] >= self.WINDOW_MINUTES:
            self._departures.popleft()


class ShipFlagEvaluator(StatisticsEvaluator):
    """Tracks the nautical flag of every distinct ship that arrived."""

    def __init__(self):
        super().__init__()
        self._seen = set()
        self._flags = Counter()

    def on_process_movement(self, movement):
        if not isinstance(movement, ShipMovement) or movement.direction is not MovementDirection.INBOUND:
            return
        ship = movement.ship
        if ship.imo_number in self._seen:
            return
        self._seen.add(ship.imo_number)
        self._flags[ship.flag] += 1

    def flag_statistic(self, flag):
        return self._flags[NauticalFlag(flag)]

    def flag_distribution(self):
        return {flag: self._flags[flag] for flag in NauticalFlag}


class CargoDecompositionEvaluator(StatisticsEvaluator):
    """Breaks down all cargo that entered the port by class and type."""

    def __init__(self):
        super().__init__()
        self.cargo_distribution = Counter()     # "BulkCargo" / "Container" -> count
        self.bulk_cargo_distribution = Counter()
        self.container_distribution = Counter()

    def on_process_movement(self, movement):
        if not isinstance(movement, CargoMovement) or movement.direction is not MovementDirection.INBOUND:
            return
        for cargo in movement.cargo:
            self.cargo_distribution[type(cargo).__name__] += 1
            if isinstance(cargo, BulkCargo):
                self.bulk_cargo_distribution[cargo.type] += 1
            elif isinstance(cargo, Container):
                self.container_distribution[cargo.type] += 1

    def bulk_cargo_breakdown(self):
        return {kind: self.bulk_cargo_distribution[kind] for kind in BulkCargoType}

    def container_breakdown(self):
        return {kind: self.container_distribution[kind] for kind in ContainerType}


class QuayOccupancyEvaluator(StatisticsEvaluator):
    """
    Records which ship sits at which quay after every minute.

    The log is a (minutes, quays) matrix of IMO numbers with 0 marking an empty
    berth, which is what the Gantt chart in port_visualizer is drawn from.
    """

    def __init__(self, port):
        super().__init__()
        self.port = port
        self._rows = []
        self._minutes = []                  # Port clock reading for each row

    def quays_occupied(self):
        return sum(1 for quay in self.port.quays if not quay.is_empty())

    def on_elapse_minute(self):
        super().on_elapse_minute()
        self._minutes.append(self.port.time)
        self._rows.append([
            quay.ship.imo_number if quay.ship is not None else 0
            for quay in self.port.quays
        ])

    def occupancy_log(self):
        if not self._rows:
            return np.zeros((0, len(self.port.quays)), dtype=np.int64)
        width = max(len(row) for row in self._rows)
        log = np.zeros((len(self._rows), width), dtype=np.int64)
        for i, row in enumerate(self._rows):
            log[i, :len(row)] = row
        return log

    def mean_occupancy(self):
        log = self.occupancy_log()
        if log.size == 0:
            return 0.0
        return float(np.mean(log != 0))

    def occupancy_intervals(self):
        """
        Collapses the log into one record per uninterrupted stay at a quay.

        Each record is a dict with quay index, IMO number, and the first/last
        port minute of the stay (inclusive).
        """
        log = self.occupancy_log()
        intervals = []
        for column in range(log.shape[1]):
            current, start, previous = 0, 0, 0
            for minute, imo in zip(self._minutes, log[:, column]):
                if imo != current:
                    if current:
                        intervals.append({"quay": column, "imo_number": int(current),
                                          "start": start, "end": previous})
                    current, start = imo, minute
                previous = minute
            if current:
                intervals.append({"quay": column, "imo_number": int(current),
                                  "start": start, "end": self._minutes[-1]})
        return intervals


EVALUATOR_TYPES = {
    "ShipThroughputEvaluator": ShipThroughputEvaluator,
    "ShipFlagEvaluator": ShipFlagEvaluator,
    "CargoDecompositionEvaluator": CargoDecompositionEvaluator,
    "QuayOccupancyEvaluator": QuayOccupancyEvaluator,
}


def make_evaluator(name, port):
    try:
        evaluator_cls = EVALUATOR_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown evaluator: {name}") from None
    if evaluator_cls is QuayOccupancyEvaluator:
        return evaluator_cls(port)
    return evaluator_cls()
