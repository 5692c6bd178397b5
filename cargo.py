from enum import Enum

from errors import whole_number


class BulkCargoType(Enum):
    COAL = "COAL"
    GRAIN = "GRAIN"
    MINERALS = "MINERALS"
    OIL = "OIL"
    OTHER = "OTHER"


class ContainerType(Enum):
    OPEN_TOP = "OPEN_TOP"
    OTHER = "OTHER"
    REEFER = "REEFER"
    STANDARD = "STANDARD"
    TANKER = "TANKER"


class Cargo:
    def __init__(self, cargo_id, destination):
        # --- IDENTITY (never changes once created) ---
        cargo_id = whole_number(cargo_id, "Cargo ID")
        if cargo_id < 0:
            raise ValueError(f"Cargo ID must be >= 0, got {cargo_id}")
        self._id = cargo_id
        self._destination = destination     # Port code the cargo is heading to

    @property
    def id(self):
        return self._id

    @property
    def destination(self):
        return self._destination

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id}, destination={self.destination})"


class BulkCargo(Cargo):
    def __init__(self, cargo_id, destination, tonnage, cargo_type):
        super().__init__(cargo_id, destination)
        tonnage = whole_number(tonnage, "Bulk cargo tonnage")
        if tonnage < 0:
            raise ValueError(f"Bulk cargo tonnage must be >= 0, got {tonnage}")
        self._tonnage = tonnage
        self._type = BulkCargoType(cargo_type)

    @property
    def tonnage(self):
        return self._tonnage

    @property
    def type(self):
        return self._type

    def __repr__(self):
        return (f"BulkCargo(id={self.id}, destination={self.destination}, "
                f"type={self.type.value}, tonnage={self.tonnage})")


class Container(Cargo):
    def __init__(self, cargo_id, destination, container_type):
        super().__init__(cargo_id, destination)
        self._type = ContainerType(container_type)

    @property
    def type(self):
        return self._type

    def __repr__(self):
        return (f"Container(id={self.id}, destination={self.destination}, "
                f"type={self.type.value})")
