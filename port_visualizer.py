import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np

from evaluators import QuayOccupancyEvaluator, ShipThroughputEvaluator
from scenario import build_port
from ship_generator import generate_scenario


OUTPUT_DIR = "visualisations"


def run_episode(minutes=600, seed=42, scenario=None):
    if scenario is None:
        scenario = generate_scenario(seed=seed, max_minutes=minutes)
    port, ships, _ = build_port(scenario)

    occupancy = QuayOccupancyEvaluator(port)
    throughput = ShipThroughputEvaluator()
    port.add_statistics_evaluator(occupancy)
    port.add_statistics_evaluator(throughput)

    throughput_log = []
    for _ in range(minutes):
        port.elapse_one_minute()
        throughput_log.append(throughput.throughput_per_hour)

    return port, ships, occupancy, np.array(throughput_log, dtype=np.int64)


def draw_gantt(intervals, quays, minutes, ships=None, title="Quay Occupancy"):
    if not intervals:
        print("No ships were docked in this run.")
        return None

    fig, ax = plt.subplots(figsize=(16, max(4, len(quays) * 1.2)))
    colours = {"BulkQuay": "tab:brown", "ContainerQuay": "tab:blue"}

    for entry in intervals:
        quay = quays[entry["quay"]]
        start = entry["start"]
        duration = max(1, entry["end"] - start + 1)

        ax.broken_barh(
            [(start, duration)],
            (entry["quay"] + 0.1, 0.8),
            facecolors=colours.get(type(quay).__name__, "grey"),
            edgecolors="black",
            linewidth=0.8,
            alpha=0.85,
        )

        if duration > 15:
            label = entry["imo_number"]
            if ships is not None and label in ships:
                label = ships.get(label).name
            ax.text(
                start + duration / 2,
                entry["quay"] + 0.5,
                str(label),
                ha="center",
                va="center",
                fontsize=7,
                fontweight="bold",
                color="white",
            )

    ax.set_xlim(0, minutes)
    ax.set_ylim(0, len(quays))
    ax.set_yticks(np.arange(len(quays)) + 0.5)
    ax.set_yticklabels([f"{type(q).__name__} {q.id}" for q in quays], fontsize=8)

    minute_ticks = np.arange(0, minutes + 1, 60)
    ax.set_xticks(minute_ticks)
    ax.set_xticklabels([f"{int(t / 60)}h" for t in minute_ticks], fontsize=8)

    ax.set_xlabel("Simulation Time (each step = 1 min)", fontsize=11)
    ax.set_title(title, fontsize=13, fontweight="bold")
    ax.grid(True, axis="x", linestyle=":", alpha=0.4)

    handles = [mpatches.Patch(color=c, label=name) for name, c in colours.items()]
    ax.legend(handles=handles, loc="upper right", fontsize=9)

    plt.tight_layout()
    return fig


def draw_throughput(throughput_log, title="Ship Throughput (last 60 min)"):
    if len(throughput_log) == 0:
        return None

    fig, ax = plt.subplots(figsize=(14, 4))
    ax.step(np.arange(1, len(throughput_log) + 1), throughput_log, where="post", color="tab:green")
    ax.set_xlim(0, len(throughput_log))
    ax.set_ylim(0, max(1, int(throughput_log.max()) + 1))
    ax.set_xlabel("Simulation Time (minutes)", fontsize=11)
    ax.set_ylabel("Departures / hour", fontsize=11)
    ax.set_title(title, fontsize=13, fontweight="bold")
    ax.grid(True, linestyle=":", alpha=0.4)

    plt.tight_layout()
    return fig


def print_summary(port, intervals, ships):
    print("\n" + "=" * 75)
    print("RUN SUMMARY")
    print("=" * 75)
    print(f"Port: {port.name}   Minute: {port.time}")
    print(f"Ships known: {len(ships)}   Still queued: {len(port.ship_queue)}")
    print(f"Stored cargo: {len(port.stored_cargo)}   Pending movements: {len(port.movements)}")

    if intervals:
        print("\n  Quay        IMO      Start    End   Minutes")
        print(" " + "-" * 46)
        for e in intervals:
            print(
                f"  {e['quay']:>4}  {e['imo_number']:>9}  {e['start']:>6}  {e['end']:>6}"
                f"  {e['end'] - e['start'] + 1:>7}"
            )
    print("=" * 75 + "\n")


def save_figures(figures, output_dir=OUTPUT_DIR):
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for name, fig in figures.items():
        if fig is None:
            continue
        path = os.path.join(output_dir, f"{name}.png")
        fig.savefig(path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        paths.append(path)
        print(f"Saved: {path}")
    return paths


def main():
    print("=" * 60)
    print("PORT SIMULATION - VISUALISER")
    print("=" * 60)

    port, ships, occupancy, throughput_log = run_episode()
    intervals = occupancy.occupancy_intervals()
    print_summary(port, intervals, ships)

    save_figures({
        "quay_gantt": draw_gantt(intervals, port.quays, port.time, ships),
        "throughput": draw_throughput(throughput_log),
    })


if __name__ == "__main__":
    main()
