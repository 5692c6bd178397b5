# =============================================================================
# run_sim.py - Running the port simulation from the command line
# =============================================================================

from __future__ import annotations

import argparse
import csv
import json
import logging
import os
from datetime import datetime, timezone

from evaluators import (
    CargoDecompositionEvaluator,
    QuayOccupancyEvaluator,
    ShipFlagEvaluator,
    ShipThroughputEvaluator,
    make_evaluator,
)
from scenario import build_port, load_scenario
from ship_generator import DEFAULT_GENERATOR_CONFIG, generate_scenario


DEFAULT_CONFIG = {
    "seed": 42,
    "minutes": 600,
    "scenario": None,                   # Path to a scenario JSON; None = generate one
    "generator": dict(DEFAULT_GENERATOR_CONFIG),
    "evaluators": [
        "ShipThroughputEvaluator",
        "ShipFlagEvaluator",
        "CargoDecompositionEvaluator",
        "QuayOccupancyEvaluator",
    ],
    "log_level": "INFO",
    "kpi": {
        "enabled": True,
        "output_dir": "metrics",
    },
    "visualise": {
        "enabled": False,
        "output_dir": "visualisations",
    },
}


def _deep_merge(base: dict, updates: dict) -> dict:
    merged = dict(base)
    for k, v in updates.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def load_config(argv: list[str] | None = None) -> dict:
    parser = argparse.ArgumentParser(description="Run the port simulation")
    parser.add_argument("--config", default="sim_config.json", help="Path to JSON config file")
    parser.add_argument("--seed", type=int, default=None, help="Override seed from config")
    parser.add_argument("--minutes", type=int, default=None, help="Override minutes from config")
    parser.add_argument("--scenario", default=None, help="Scenario JSON to run instead of a generated one")
    parser.add_argument("--visualise", action="store_true", help="Save quay occupancy charts")
    args = parser.parse_args(argv)

    config = dict(DEFAULT_CONFIG)
    if os.path.exists(args.config):
        with open(args.config, "r", encoding="utf-8") as f:
            file_cfg = json.load(f)
        config = _deep_merge(config, file_cfg)

    if args.seed is not None:
        config["seed"] = args.seed
    if args.minutes is not None:
        config["minutes"] = args.minutes
    if args.scenario is not None:
        config["scenario"] = args.scenario
    if args.visualise:
        config = _deep_merge(config, {"visualise": {"enabled": True}})

    config["_config_path"] = args.config
    return config


def init_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def build_simulation(cfg: dict):
    if cfg.get("scenario"):
        port, ships, cargo = load_scenario(cfg["scenario"])
    else:
        gen_cfg = _deep_merge(cfg.get("generator", {}), {"max_minutes": int(cfg["minutes"])})
        port, ships, cargo = build_port(generate_scenario(seed=int(cfg["seed"]), **gen_cfg))

    have = {type(e).__name__ for e in port.evaluators}
    for name in cfg.get("evaluators", []):
        if name not in have:
            port.add_statistics_evaluator(make_evaluator(name, port))
    return port, ships, cargo


def _find(port, evaluator_cls):
    for evaluator in port.evaluators:
        if isinstance(evaluator, evaluator_cls):
            return evaluator
    return None


def compute_kpis(port, minutes: int, seed: int, max_throughput: int) -> dict:
    metrics = {
        "timestamp_utc": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "seed": int(seed),
        "port": port.name,
        "minutes": int(minutes),
        "final_time": int(port.time),
        "quays_total": len(port.quays),
        "quays_occupied": sum(1 for q in port.quays if not q.is_empty()),
        "ships_queued": len(port.ship_queue),
        "stored_cargo": len(port.stored_cargo),
        "pending_movements": len(port.movements),
        "max_throughput_per_hour": int(max_throughput),
    }

    occupancy = _find(port, QuayOccupancyEvaluator)
    if occupancy is not None:
        metrics["mean_quay_occupancy"] = occupancy.mean_occupancy()

    flags = _find(port, ShipFlagEvaluator)
    if flags is not None:
        for flag, count in flags.flag_distribution().items():
            metrics[f"ships_flag_{flag.value.lower()}"] = int(count)

    decomposition = _find(port, CargoDecompositionEvaluator)
    if decomposition is not None:
        metrics["cargo_in_bulk"] = int(decomposition.cargo_distribution["BulkCargo"])
        metrics["cargo_in_containers"] = int(decomposition.cargo_distribution["Container"])

    return metrics


def save_kpis(kpi_cfg: dict, metrics: dict) -> tuple[str, str]:
    out_dir = kpi_cfg.get("output_dir", "metrics")
    os.makedirs(out_dir, exist_ok=True)

    run_id = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    json_path = os.path.join(out_dir, f"run_{run_id}.json")
    csv_path = os.path.join(out_dir, "runs.csv")

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(metrics, f, indent=2)

    headers = list(metrics.keys())
    write_header = not os.path.exists(csv_path)
    with open(csv_path, "a", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        if write_header:
            writer.writeheader()
        writer.writerow(metrics)

    return json_path, csv_path


def run(cfg: dict) -> dict:
    minutes = int(cfg["minutes"])
    seed = int(cfg["seed"])

    print("\n[1/3] Building the port...")
    port, ships, _ = build_simulation(cfg)
    print(f"      {port!r}")

    print(f"\n[2/3] Running {minutes:,} simulated minutes...")
    throughput = _find(port, ShipThroughputEvaluator)
    max_throughput = 0
    for _ in range(minutes):
        port.elapse_one_minute()
        if throughput is not None:
            max_throughput = max(max_throughput, throughput.throughput_per_hour)
    print(f"      Finished at minute {port.time}.")

    print("\n[3/3] Collecting results...")
    metrics = compute_kpis(port, minutes, seed, max_throughput)
    for key, value in metrics.items():
        print(f"  {key:<26}: {value}")

    if cfg.get("kpi", {}).get("enabled", True):
        json_path, csv_path = save_kpis(cfg.get("kpi", {}), metrics)
        print("\nKPI artifacts saved:")
        print(f"  JSON: {json_path}")
        print(f"  CSV : {csv_path}")

    occupancy = _find(port, QuayOccupancyEvaluator)
    if cfg.get("visualise", {}).get("enabled", False) and occupancy is not None:
        from port_visualizer import draw_gantt, save_figures

        fig = draw_gantt(occupancy.occupancy_intervals(), port.quays, port.time, ships)
        save_figures({"quay_gantt": fig}, cfg["visualise"].get("output_dir", "visualisations"))

    return metrics


def main(argv: list[str] | None = None) -> None:
    cfg = load_config(argv)
    init_logging(cfg.get("log_level", "INFO"))

    print("=" * 60)
    print("PORT SIMULATION - RUN")
    print("=" * 60)
    print(f"Run seed: {cfg['seed']}")
    print(f"Config path: {cfg.get('_config_path')}")

    run(cfg)

    print("\n" + "=" * 60)
    print("Simulation complete.")
    print("=" * 60)


if __name__ == "__main__":
    main()
