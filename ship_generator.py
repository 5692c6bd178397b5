import numpy as np

from cargo import BulkCargoType, ContainerType
from ship_manager import NauticalFlag


ORIGIN_FLAGS = ["AU", "CN", "JP", "NZ", "SG"]
FLAG_WEIGHTS = {                     # Most ships report nothing special
    NauticalFlag.NOVEMBER: 0.7,
    NauticalFlag.HOTEL: 0.15,
    NauticalFlag.WHISKEY: 0.05,
    NauticalFlag.BRAVO: 0.1,
}

DEFAULT_GENERATOR_CONFIG = {
    "num_ships": 12,
    "num_bulk_quays": 2,
    "num_container_quays": 2,
    "num_cargo": 40,
    "container_share": 0.6,
    "mean_interarrival": 30.0,
    "max_minutes": 600,
}


def _pick_flag(rng):
    flags = list(FLAG_WEIGHTS)
    return flags[rng.choice(len(flags), p=list(FLAG_WEIGHTS.values()))].value


def generate_single_ship(rng, imo_number, last_arrival_time=0.0, mean_interarrival=30.0):
    """
    Draws one ship and the minute it arrives at the port.

    Returns (ship_dict, arrival_minute). The ship dict uses the scenario
    format understood by scenario.build_port.
    """
    is_container = bool(rng.random() < 0.5)

    # 1. Capacity: Normal distribution clipped to a sensible range per ship type
    if is_container:
        capacity = int(np.clip(rng.normal(20, 6), 5, 40))           # Containers
    else:
        capacity = int(np.clip(rng.normal(120, 30), 40, 200))       # Tonnes

    # 2. Arrival: Exponential distribution (Poisson process)
    arrival = last_arrival_time + rng.exponential(scale=mean_interarrival)

    ship = {
        "type": "ContainerShip" if is_container else "BulkCarrier",
        "imo_number": int(imo_number),
        "name": f"{'CS' if is_container else 'BC'}-{imo_number}",
        "origin_flag": ORIGIN_FLAGS[rng.integers(len(ORIGIN_FLAGS))],
        "flag": _pick_flag(rng),
        "capacity": capacity,
        "cargo": [],
    }
    return ship, float(arrival)


def generate_single_cargo(rng, cargo_id, container_share=0.6):
    destination = ORIGIN_FLAGS[rng.integers(len(ORIGIN_FLAGS))]
    if rng.random() < container_share:
        container_types = list(ContainerType)
        return {
            "type": "Container",
            "id": int(cargo_id),
            "destination": destination,
            "container_type": container_types[rng.integers(len(container_types))].value,
        }
    bulk_types = list(BulkCargoType)
    return {
        "type": "BulkCargo",
        "id": int(cargo_id),
        "destination": destination,
        "tonnage": int(np.clip(rng.normal(90, 30), 10, 200)),
        "bulk_type": bulk_types[rng.integers(len(bulk_types))].value,
    }


def generate_scenario(seed=None, **overrides):
    """
    Builds a random scenario dict for scenario.build_port.

    Quays are sized from the generated ships so every ship can dock somewhere.
    Each ship gets an INBOUND movement at its arrival minute and an OUTBOUND
    movement a while later. Half of the cargo starts in the warehouse and the
    rest arrives through INBOUND cargo movements.
    """
    cfg = dict(DEFAULT_GENERATOR_CONFIG)
    cfg.update(overrides)
    rng = np.random.default_rng(seed)
    max_minutes = int(cfg["max_minutes"])

    # --- Ships & their movements ---
    ships, movements = [], []
    last_arrival = 0.0
    for n in range(int(cfg["num_ships"])):
        ship, arrival = generate_single_ship(rng, 1_000_000 + n,
                                             last_arrival, cfg["mean_interarrival"])
        last_arrival = arrival
        ships.append(ship)

        arrival_minute = max(1, int(round(arrival)))
        if arrival_minute >= max_minutes:
            continue
        movements.append({"type": "ShipMovement", "time": arrival_minute,
                          "direction": "INBOUND", "ship": ship["imo_number"]})
        stay = int(rng.integers(20, 90))
        movements.append({"type": "ShipMovement", "time": arrival_minute + stay,
                          "direction": "OUTBOUND", "ship": ship["imo_number"]})

    # --- Quays ---
    max_tonnage = max([s["capacity"] for s in ships if s["type"] == "BulkCarrier"], default=100)
    max_containers = max([s["capacity"] for s in ships if s["type"] == "ContainerShip"], default=20)
    quays = []
    for _ in range(int(cfg["num_bulk_quays"])):
        quays.append({"type": "BulkQuay", "id": len(quays), "max_tonnage": max_tonnage, "ship": None})
    for _ in range(int(cfg["num_container_quays"])):
        quays.append({"type": "ContainerQuay", "id": len(quays),
                      "max_containers": max_containers, "ship": None})

    # --- Cargo: half stored, half delivered during the run ---
    cargo = [generate_single_cargo(rng, i, cfg["container_share"]) for i in range(int(cfg["num_cargo"]))]
    split = len(cargo) // 2
    stored = [c["id"] for c in cargo[:split]]
    for c in cargo[split:]:
        movements.append({"type": "CargoMovement", "time": int(rng.integers(1, max_minutes)),
                          "direction": "INBOUND", "cargo": [c["id"]]})

    movements.sort(key=lambda m: m["time"])
    return {
        "name": "Generated Port",
        "time": 0,
        "cargo": cargo,
        "ships": ships,
        "quays": quays,
        "ship_queue": [],
        "stored_cargo": stored,
        "movements": movements,
        "evaluators": [],
    }
