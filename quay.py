from errors import whole_number


class Quay:
    """
    A fixed berth that holds at most one docked ship.

    The quay keeps a non-owning reference to the ship; the ship itself never
    knows which quay it is at.
    """

    def __init__(self, quay_id):
        quay_id = whole_number(quay_id, "Quay ID")
        if quay_id < 0:
            raise ValueError(f"Quay ID must be >= 0, got {quay_id}")
        self._id = quay_id
        self.ship = None                    # None = empty berth

    @property
    def id(self):
        return self._id

    def is_empty(self):
        return self.ship is None

    def ship_arrives(self, ship):
        # Docking onto an occupied berth is a caller bug, not a normal outcome
        if self.ship is not None:
            raise RuntimeError(
                f"Quay {self.id} already holds ship {self.ship.imo_number}"
            )
        self.ship = ship

    def ship_departs(self):
        current = self.ship
        self.ship = None
        return current

    def __repr__(self):
        ship = self.ship.imo_number if self.ship is not None else None
        return f"{type(self).__name__}(id={self.id}, ship={ship})"


class BulkQuay(Quay):
    def __init__(self, quay_id, max_tonnage):
        super().__init__(quay_id)
        max_tonnage = whole_number(max_tonnage, "max_tonnage")
        if max_tonnage < 0:
            raise ValueError(f"max_tonnage must be >= 0, got {max_tonnage}")
        self.max_tonnage = max_tonnage


class ContainerQuay(Quay):
    def __init__(self, quay_id, max_containers):
        super().__init__(quay_id)
        max_containers = whole_number(max_containers, "max_containers")
        if max_containers < 0:
            raise ValueError(f"max_containers must be >= 0, got {max_containers}")
        self.max_containers = max_containers
