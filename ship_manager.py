from abc import ABC, abstractmethod
from enum import Enum

from cargo import BulkCargo, Container
from errors import NoSuchCargoError, whole_number
from quay import BulkQuay, ContainerQuay


IMO_NUMBER_MIN = 1_000_000
IMO_NUMBER_MAX = 9_999_999


class NauticalFlag(Enum):
    BRAVO = "BRAVO"         # Carrying dangerous cargo
    HOTEL = "HOTEL"         # Ready to dock
    NOVEMBER = "NOVEMBER"   # Nothing to report
    WHISKEY = "WHISKEY"     # Requires medical assistance


class Ship(ABC):
    def __init__(self, imo_number, name, origin_flag, flag, capacity):
        # --- IDENTITY (fixed for the lifetime of the ship) ---
        imo_number = whole_number(imo_number, "IMO number")
        capacity = whole_number(capacity, "Ship capacity")
        if not IMO_NUMBER_MIN <= imo_number <= IMO_NUMBER_MAX:
            raise ValueError(f"IMO number must be a positive 7 digit integer, got {imo_number}")
        if capacity < 0:
            raise ValueError(f"Ship capacity must be >= 0, got {capacity}")
        self._imo_number = imo_number
        self._name = name
        self._origin_flag = origin_flag     # Country code, matched against cargo destinations
        self._flag = NauticalFlag(flag)     # Status signal used by the ship queue
        self._capacity = capacity

    @property
    def imo_number(self):
        return self._imo_number

    @property
    def name(self):
        return self._name

    @property
    def origin_flag(self):
        return self._origin_flag

    @property
    def flag(self):
        return self._flag

    @property
    def capacity(self):
        return self._capacity

    @abstractmethod
    def can_dock(self, quay):
        ...

    @abstractmethod
    def can_load(self, cargo):
        ...

    @abstractmethod
    def has_cargo(self):
        ...

    @abstractmethod
    def cargo(self):
        """Returns the cargo currently aboard as a new list."""

    @abstractmethod
    def _store(self, cargo):
        ...

    @abstractmethod
    def unload_cargo(self):
        ...

    def load_cargo(self, cargo):
        if not self.can_load(cargo):
            raise ValueError(f"{self.name} ({self.imo_number}) cannot load {cargo!r}")
        self._store(cargo)

    def __repr__(self):
        return (f"{type(self).__name__}(imo={self.imo_number}, name={self.name}, "
                f"origin={self.origin_flag}, flag={self.flag.value}, "
                f"cargo={len(self.cargo())})")


class BulkCarrier(Ship):
    """A ship with a single hold rated in tonnes."""

    def __init__(self, imo_number, name, origin_flag, flag, capacity):
        super().__init__(imo_number, name, origin_flag, flag, capacity)
        self._hold = None                   # At most one BulkCargo

    def can_dock(self, quay):
        return isinstance(quay, BulkQuay) and quay.max_tonnage >= self.capacity

    def can_load(self, cargo):
        return (
            self._hold is None
            and isinstance(cargo, BulkCargo)
            and cargo.tonnage <= self.capacity
            and cargo.destination == self.origin_flag
        )

    def has_cargo(self):
        return self._hold is not None

    def cargo(self):
        return [] if self._hold is None else [self._hold]

    def _store(self, cargo):
        self._hold = cargo

    def unload_cargo(self):
        if self._hold is None:
            raise NoSuchCargoError(f"{self.name} ({self.imo_number}) has no cargo to unload")
        unloaded, self._hold = self._hold, None
        return [unloaded]


class ContainerShip(Ship):
    """A ship whose hold is counted in container slots."""

    def __init__(self, imo_number, name, origin_flag, flag, capacity):
        super().__init__(imo_number, name, origin_flag, flag, capacity)
        self._containers = []

    def can_dock(self, quay):
        return isinstance(quay, ContainerQuay) and quay.max_containers >= self.capacity

    def can_load(self, cargo):
        return (
            isinstance(cargo, Container)
            and len(self._containers) < self.capacity
            and cargo.destination == self.origin_flag
        )

    def has_cargo(self):
        return bool(self._containers)

    def cargo(self):
        return list(self._containers)

    def _store(self, cargo):
        self._containers.append(cargo)

    def unload_cargo(self):
        if not self._containers:
            raise NoSuchCargoError(f"{self.name} ({self.imo_number}) has no containers to unload")
        unloaded, self._containers = self._containers, []
        return unloaded
