from ship_manager import ContainerShip, NauticalFlag


class ShipQueue:
    """
    Ships waiting outside the port for a free quay.

    Ships are stored in arrival order. ``peek``/``poll`` pick the next ship
    with a fixed cascade of priority tiers; the earliest arrival wins inside a
    tier:

        1. BRAVO flag     (carrying dangerous cargo)
        2. WHISKEY flag   (requires medical assistance)
        3. HOTEL flag     (ready to dock)
        4. any ContainerShip
        5. head of the queue
    """

    PRIORITY_TIERS = (
        lambda ship: ship.flag is NauticalFlag.BRAVO,
        lambda ship: ship.flag is NauticalFlag.WHISKEY,
        lambda ship: ship.flag is NauticalFlag.HOTEL,
        lambda ship: isinstance(ship, ContainerShip),
    )

    def __init__(self, ships=None):
        self._ships = list(ships) if ships is not None else []

    def add(self, ship):
        self._ships.append(ship)

    def peek(self):
        for in_tier in self.PRIORITY_TIERS:
            for ship in self._ships:
                if in_tier(ship):
                    return ship
        return self._ships[0] if self._ships else None

    def poll(self):
        ship = self.peek()
        if ship is not None:
            self._ships.remove(ship)
        return ship

    @property
    def ships(self):
        return list(self._ships)

    def __len__(self):
        return len(self._ships)

    def __iter__(self):
        return iter(list(self._ships))

    def __eq__(self, other):
        if not isinstance(other, ShipQueue):
            return NotImplemented
        return self._ships == other._ships

    def __repr__(self):
        return f"ShipQueue({[ship.imo_number for ship in self._ships]})"
