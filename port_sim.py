import logging

from errors import whole_number
from movement import CargoMovement, MovementDirection, MovementQueue, ShipMovement
from ship_queue import ShipQueue

logger = logging.getLogger(__name__)

DOCKING_INTERVAL = 10     # Waiting ships are docked every 10 minutes
UNLOADING_INTERVAL = 5    # Docked ships are unloaded every 5 minutes (when not docking)


class Port:
    def __init__(self, name, time=0, ship_queue=None, quays=None, stored_cargo=None):
        time = whole_number(time, "Port time")
        if time < 0:
            raise ValueError(f"The time since simulation start must be >= 0, got {time}")

        # --- IDENTITY & LAYOUT ---
        self._name = name
        self._quays = list(quays) if quays is not None else []

        # --- DYNAMIC STATE (owned by the port, changed only by ticks) ---
        self._time = time
        self._ship_queue = ship_queue if ship_queue is not None else ShipQueue()
        self._stored_cargo = list(stored_cargo) if stored_cargo is not None else []
        self._movements = MovementQueue(current_time=self._time)
        self._evaluators = []
        self._ticking = False

    # =========================================================================
    # ACCESSORS
    # =========================================================================
    @property
    def name(self):
        return self._name

    @property
    def time(self):
        return self._time

    @property
    def quays(self):
        return list(self._quays)

    @property
    def stored_cargo(self):
        return list(self._stored_cargo)

    @property
    def ship_queue(self):
        return self._ship_queue

    @property
    def movements(self):
        return self._movements

    @property
    def evaluators(self):
        return list(self._evaluators)

    # =========================================================================
    # SETUP
    # =========================================================================
    def add_quay(self, quay):
        self._quays.append(quay)

    def add_statistics_evaluator(self, evaluator):
        self._check_not_ticking()
        if evaluator not in self._evaluators:
            self._evaluators.append(evaluator)

    def remove_statistics_evaluator(self, evaluator):
        self._check_not_ticking()
        if evaluator in self._evaluators:
            self._evaluators.remove(evaluator)

    def add_movement(self, movement):
        """Schedules a movement. Raises MovementInPastError if it is before the clock."""
        self._movements.add(movement)

    def _check_not_ticking(self):
        if self._ticking:
            raise RuntimeError("Evaluators cannot be changed while a minute is elapsing")

    # =========================================================================
    # TICK — Advance the simulation by one minute
    # =========================================================================
    def elapse_one_minute(self):
        """
        Runs one simulated minute. The phases always run in this order:

          1. Advance the clock
          2. Every 10 minutes: dock waiting ships onto free quays
          3. Otherwise every 5 minutes: unload docked ships into the warehouse
          4. Process the movements due this minute
          5. Tell every evaluator a minute has passed

        Phases 2 and 3 never run in the same minute: on a multiple of 10 only
        the docking phase runs.
        """
        if self._ticking:
            raise RuntimeError("elapse_one_minute() is not re-entrant")
        self._ticking = True
        try:
            self._advance_clock()
            if self._time % DOCKING_INTERVAL == 0:
                self._dock_waiting_ships()
            elif self._time % UNLOADING_INTERVAL == 0:
                self._unload_docked_ships()
            self._process_due_movements()
            self._notify_elapsed_minute()
        finally:
            self._ticking = False

    # --- 1. CLOCK ---
    def _advance_clock(self):
        self._time += 1

    # --- 2. DOCKING ---
    def _dock_waiting_ships(self):
        for quay in self._quays:
            if not quay.is_empty():
                continue
            ship = self._ship_queue.peek()
            if ship is None:
                break
            if ship.can_dock(quay):
                quay.ship_arrives(self._ship_queue.poll())
                logger.debug("Minute %d: %s docked at quay %d", self._time, ship.name, quay.id)

    # --- 3. UNLOADING ---
    def _unload_docked_ships(self):
        for quay in self._quays:
            ship = quay.ship
            if ship is None or not ship.has_cargo():
                continue
            unloaded = ship.unload_cargo()
            self._stored_cargo.extend(unloaded)
            logger.debug("Minute %d: unloaded %d cargo from %s at quay %d",
                         self._time, len(unloaded), ship.name, quay.id)

    # --- 4. MOVEMENTS ---
    def _process_due_movements(self):
        for movement in self._movements.pop_due(self._time):
            self.process_movement(movement)

    # --- 5. EVALUATORS ---
    def _notify_elapsed_minute(self):
        for evaluator in self._evaluators:
            evaluator.on_elapse_minute()

    # =========================================================================
    # MOVEMENT PROCESSING
    # =========================================================================
    def process_movement(self, movement):
        if isinstance(movement, ShipMovement):
            if movement.direction is MovementDirection.INBOUND:
                self._ship_queue.add(movement.ship)
            else:
                self._load_departing_ship(movement.ship)
        elif isinstance(movement, CargoMovement):
            if movement.direction is MovementDirection.INBOUND:
                self._stored_cargo.extend(movement.cargo)
            else:
                leaving = {cargo.id for cargo in movement.cargo}
                self._stored_cargo = [c for c in self._stored_cargo if c.id not in leaving]
        else:
            raise TypeError(f"Unknown movement type: {type(movement).__name__}")

        logger.debug("Minute %d: processed %r", self._time, movement)
        for evaluator in self._evaluators:
            evaluator.on_process_movement(movement)

    def _load_departing_ship(self, ship):
        # Iterate over a snapshot; loaded cargo is removed from the warehouse as we go
        for cargo in list(self._stored_cargo):
            if cargo.destination != ship.origin_flag or not ship.can_load(cargo):
                continue
            self._stored_cargo.remove(cargo)
            ship.load_cargo(cargo)
            for quay in self._quays:
                if quay.ship is ship:
                    quay.ship_departs()
                    logger.debug("Minute %d: %s left quay %d", self._time, ship.name, quay.id)

    def __repr__(self):
        occupied = sum(1 for quay in self._quays if not quay.is_empty())
        return (f"Port(name={self.name}, time={self.time}, quays={len(self._quays)}, "
                f"occupied={occupied}, queued={len(self._ship_queue)}, "
                f"stored_cargo={len(self._stored_cargo)}, movements={len(self._movements)})")
