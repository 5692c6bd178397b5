"""
Building a Port from a plain scenario description and back.

A scenario is the JSON-friendly dict below. Ships, quays and movements refer
to cargo and ships by id, and the references are resolved through registries
owned by the build call:

    {
        "name": "Brisbane",
        "time": 0,
        "cargo": [{"type": "BulkCargo", "id": 1, "destination": "AU",
                   "tonnage": 50, "bulk_type": "COAL"},
                  {"type": "Container", "id": 2, "destination": "NZ",
                   "container_type": "REEFER"}],
        "ships": [{"type": "BulkCarrier", "imo_number": 1234567, "name": "Ever",
                   "origin_flag": "AU", "flag": "HOTEL", "capacity": 120,
                   "cargo": [1]}],
        "quays": [{"type": "BulkQuay", "id": 0, "max_tonnage": 150, "ship": null}],
        "ship_queue": [1234567],
        "stored_cargo": [2],
        "movements": [{"type": "ShipMovement", "time": 5,
                       "direction": "OUTBOUND", "ship": 1234567}],
        "evaluators": ["ShipThroughputEvaluator"]
    }
"""
from __future__ import annotations

import json
import logging
import os

from cargo import BulkCargo, Container
from errors import NoSuchCargoError, NoSuchShipError, ScenarioError
from evaluators import make_evaluator
from movement import CargoMovement, MovementDirection, ShipMovement
from port_sim import Port
from quay import BulkQuay, ContainerQuay
from registry import CargoRegistry, ShipRegistry
from ship_manager import BulkCarrier, ContainerShip
from ship_queue import ShipQueue

logger = logging.getLogger(__name__)


# =============================================================================
# ENTITY DECODERS
# =============================================================================
def _cargo_from_dict(data: dict):
    kind = data.get("type")
    if kind == "BulkCargo":
        return BulkCargo(data["id"], data["destination"], data["tonnage"], data["bulk_type"])
    if kind == "Container":
        return Container(data["id"], data["destination"], data["container_type"])
    raise ScenarioError(f"Unknown cargo type: {kind!r}")


def _ship_from_dict(data: dict):
    ship_types = {"BulkCarrier": BulkCarrier, "ContainerShip": ContainerShip}
    kind = data.get("type")
    if kind not in ship_types:
        raise ScenarioError(f"Unknown ship type: {kind!r}")
    return ship_types[kind](
        data["imo_number"], data["name"], data["origin_flag"], data["flag"], data["capacity"]
    )


def _quay_from_dict(data: dict):
    kind = data.get("type")
    if kind == "BulkQuay":
        return BulkQuay(data["id"], data["max_tonnage"])
    if kind == "ContainerQuay":
        return ContainerQuay(data["id"], data["max_containers"])
    raise ScenarioError(f"Unknown quay type: {kind!r}")


def _movement_from_dict(data: dict, ships: ShipRegistry, cargo: CargoRegistry):
    kind = data.get("type")
    if kind == "ShipMovement":
        return ShipMovement(data["time"], data["direction"], ships.get(data["ship"]))
    if kind == "CargoMovement":
        return CargoMovement(data["time"], data["direction"],
                             [cargo.get(cargo_id) for cargo_id in data["cargo"]])
    raise ScenarioError(f"Unknown movement type: {kind!r}")


# =============================================================================
# BUILD
# =============================================================================
def build_port(scenario: dict) -> tuple[Port, ShipRegistry, CargoRegistry]:
    """
    Turns a scenario dict into a ready-to-run Port.

    Returns the port together with the ship and cargo registries used to
    resolve the scenario's id references. Raises ScenarioError when a field is
    missing or invalid, or a reference points at nothing.
    """
    try:
        return _build_port(scenario)
    except ScenarioError:
        raise
    except (KeyError, TypeError) as exc:
        raise ScenarioError(f"Malformed scenario: missing or invalid field {exc}") from exc
    except (NoSuchShipError, NoSuchCargoError) as exc:
        raise ScenarioError(f"Dangling reference: {exc}") from exc
    except ValueError as exc:
        raise ScenarioError(f"Invalid scenario value: {exc}") from exc


def _build_port(scenario: dict):
    cargo = CargoRegistry(_cargo_from_dict(c) for c in scenario.get("cargo", []))
    ships = ShipRegistry()

    # Ships first: their holds claim cargo before anything else can
    placed = set()
    for ship_data in scenario.get("ships", []):
        ship = _ship_from_dict(ship_data)
        ships.register(ship)
        for cargo_id in ship_data.get("cargo", []):
            _claim(cargo_id, placed, f"ship {ship.imo_number}")
            ship.load_cargo(cargo.get(cargo_id))

    quays = []
    docked = set()
    for quay_data in scenario.get("quays", []):
        quay = _quay_from_dict(quay_data)
        if quay_data.get("ship") is not None:
            imo_number = quay_data["ship"]
            if imo_number in docked:
                raise ScenarioError(f"Ship {imo_number} is docked at more than one quay")
            docked.add(imo_number)
            quay.ship_arrives(ships.get(imo_number))
        quays.append(quay)

    ship_queue = ShipQueue()
    queued = set()
    for imo_number in scenario.get("ship_queue", []):
        if imo_number in docked:
            raise ScenarioError(f"Ship {imo_number} is both docked and queued")
        if imo_number in queued:
            raise ScenarioError(f"Ship {imo_number} is queued more than once")
        queued.add(imo_number)
        ship_queue.add(ships.get(imo_number))

    stored = []
    for cargo_id in scenario.get("stored_cargo", []):
        _claim(cargo_id, placed, "the warehouse")
        stored.append(cargo.get(cargo_id))

    port = Port(scenario.get("name", "Port"), scenario.get("time", 0), ship_queue, quays, stored)

    # Inbound movements bring in something that must not already be in the port
    arriving = docked | queued
    for movement_data in scenario.get("movements", []):
        movement = _movement_from_dict(movement_data, ships, cargo)
        if movement.direction is MovementDirection.INBOUND:
            if isinstance(movement, ShipMovement):
                imo_number = movement.ship.imo_number
                if imo_number in arriving:
                    raise ScenarioError(f"Ship {imo_number} arrives while already in port")
                arriving.add(imo_number)
            else:
                for item in movement.cargo:
                    _claim(item.id, placed, f"inbound movement at minute {movement.time}")
        port.add_movement(movement)

    for evaluator_name in scenario.get("evaluators", []):
        port.add_statistics_evaluator(make_evaluator(evaluator_name, port))

    logger.info("Built port %s: %d quays, %d ships, %d cargo, %d movements",
                port.name, len(quays), len(ships), len(cargo), len(port.movements))
    return port, ships, cargo


def _claim(cargo_id, placed, where):
    if cargo_id in placed:
        raise ScenarioError(f"Cargo {cargo_id} is placed twice (again in {where})")
    placed.add(cargo_id)


def load_scenario(path: os.PathLike | str) -> tuple[Port, ShipRegistry, CargoRegistry]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            scenario = json.load(f)
        except json.JSONDecodeError as exc:
            raise ScenarioError(f"{path} is not valid JSON: {exc}") from exc
    return build_port(scenario)


# =============================================================================
# SNAPSHOT
# =============================================================================
def _cargo_to_dict(item) -> dict:
    if isinstance(item, BulkCargo):
        return {"type": "BulkCargo", "id": item.id, "destination": item.destination,
                "tonnage": item.tonnage, "bulk_type": item.type.value}
    return {"type": "Container", "id": item.id, "destination": item.destination,
            "container_type": item.type.value}


def _quay_to_dict(quay) -> dict:
    data = {"type": type(quay).__name__, "id": quay.id,
            "ship": quay.ship.imo_number if quay.ship is not None else None}
    if isinstance(quay, BulkQuay):
        data["max_tonnage"] = quay.max_tonnage
    else:
        data["max_containers"] = quay.max_containers
    return data


def _movement_to_dict(movement) -> dict:
    data = {"type": type(movement).__name__, "time": movement.time,
            "direction": movement.direction.value}
    if isinstance(movement, ShipMovement):
        data["ship"] = movement.ship.imo_number
    else:
        data["cargo"] = [item.id for item in movement.cargo]
    return data


def snapshot(port: Port, ships: ShipRegistry, cargo: CargoRegistry) -> dict:
    """Dumps the current port state into a dict that build_port accepts."""
    return {
        "name": port.name,
        "time": port.time,
        "cargo": [_cargo_to_dict(item) for item in cargo],
        "ships": [
            {"type": type(ship).__name__, "imo_number": ship.imo_number, "name": ship.name,
             "origin_flag": ship.origin_flag, "flag": ship.flag.value,
             "capacity": ship.capacity, "cargo": [item.id for item in ship.cargo()]}
            for ship in ships
        ],
        "quays": [_quay_to_dict(quay) for quay in port.quays],
        "ship_queue": [ship.imo_number for ship in port.ship_queue],
        "stored_cargo": [item.id for item in port.stored_cargo],
        "movements": [_movement_to_dict(movement) for movement in port.movements],
        "evaluators": [type(evaluator).__name__ for evaluator in port.evaluators],
    }
