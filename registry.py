from abc import ABC, abstractmethod

from errors import NoSuchCargoError, NoSuchShipError


class _Registry(ABC):
    missing_error = KeyError
    label = "entity"

    def __init__(self, entities=()):
        self._entries = {}
        for entity in entities:
            self.register(entity)

    @abstractmethod
    def _key(self, entity):
        ...

    def register(self, entity):
        key = self._key(entity)
        if key in self._entries:
            raise ValueError(f"Duplicate {self.label} id: {key}")
        self._entries[key] = entity

    def get(self, key):
        try:
            return self._entries[key]
        except KeyError:
            raise self.missing_error(f"No {self.label} with id {key}") from None

    def __contains__(self, key):
        return key in self._entries

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())


class ShipRegistry(_Registry):
    """Ships of one scenario, keyed by IMO number."""

    missing_error = NoSuchShipError
    label = "ship"

    def _key(self, ship):
        return ship.imo_number


class CargoRegistry(_Registry):
    """Cargo of one scenario, keyed by cargo id."""

    missing_error = NoSuchCargoError
    label = "cargo"

    def _key(self, cargo):
        return cargo.id
