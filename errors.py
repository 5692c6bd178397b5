import numbers


def whole_number(value, label):
    """Returns value as an int, raising ValueError for anything that is not an integer."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{label} must be an integer, got {value!r}")
    return int(value)


class NoSuchCargoError(Exception):
    """Raised when cargo is requested from a hold or registry that does not have it."""


class NoSuchShipError(Exception):
    """Raised when a ship lookup by IMO number fails."""


class MovementInPastError(ValueError):
    """Raised when a movement is scheduled before the current simulated minute."""

    def __init__(self, movement_time, current_time):
        super().__init__(
            f"Movement at minute {movement_time} is before the current time {current_time}"
        )
        self.movement_time = movement_time
        self.current_time = current_time


class ScenarioError(ValueError):
    """Raised when a scenario description cannot be turned into a port."""
