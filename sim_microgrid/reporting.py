from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .simulation.battery import bank_flow
from .simulation.models import SimulationState

logger = logging.getLogger(__name__)

TRACE_COLUMNS = [
    "step",
    "time_h",
    "weather",
    "ambient_temperature_c",
    "solar_kw",
    "consumption_kw",
    "battery_flow_kw",
    "battery_soc",
    "battery_count",
    "grid_kw",
    "grid_importing",
    "grid_exporting",
    "total_losses_kw",
    "total_generated_kwh",
    "total_consumed_kwh",
    "total_imported_kwh",
    "total_exported_kwh",
    "net_power_kw",
    "cost_savings",
    "co2_saved_kg",
    "efficiency_pct",
]


def _slugify(value: str) -> str:
    return "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in value.strip()).strip("_")


def _create_results_directory(name: str, base_dir: Path) -> Path:
    timestamp = datetime.now().strftime("%y%m%d_%H%M")
    slug = _slugify(name) or "run"
    output_dir = base_dir / f"{timestamp}_{slug}"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def trace_frame(snapshots: Iterable[SimulationState]) -> pd.DataFrame:
    """
    Flatten a sequence of snapshots into one row per snapshot.

    Args:
        snapshots: Snapshots in tick order (e.g. from ``SimulationHost.run``).

    Returns:
        DataFrame with the columns listed in ``TRACE_COLUMNS``. Battery flow
        is signed, positive when the bank discharges. Grid power is signed,
        positive when importing.

    Example:
        ```python
        frame = trace_frame(host.run(duration_hours=24.0, step_ms=1000.0))
        frame[["time_h", "solar_kw", "battery_soc"]].head()
        ```
    """
    rows = []
    for step, state in enumerate(snapshots):
        rows.append(
            {
                "step": step,
                "time_h": state.current_time,
                "weather": state.weather.value,
                "ambient_temperature_c": state.ambient_temperature,
                "solar_kw": state.solar.current_power,
                "consumption_kw": state.consumption.total_power,
                "battery_flow_kw": bank_flow(state.battery),
                "battery_soc": state.battery.state_of_charge,
                "battery_count": len(state.batteries),
                "grid_kw": state.grid.current_flow,
                "grid_importing": state.grid.importing,
                "grid_exporting": state.grid.exporting,
                "total_losses_kw": state.losses.total_losses,
                "total_generated_kwh": state.solar.total_generated,
                "total_consumed_kwh": state.consumption.total_consumed,
                "total_imported_kwh": state.grid.total_imported,
                "total_exported_kwh": state.grid.total_exported,
                "net_power_kw": state.statistics.net_energy,
                "cost_savings": state.statistics.cost_savings,
                "co2_saved_kg": state.statistics.co2_saved,
                "efficiency_pct": state.statistics.efficiency,
            }
        )
    return pd.DataFrame(rows, columns=TRACE_COLUMNS)


def summarize_trace(frame: pd.DataFrame) -> Dict[str, float]:
    """Headline figures of a trace: SoC range, peak flows and final counters."""
    if frame.empty:
        return {"steps": 0}
    last = frame.iloc[-1]
    return {
        "steps": int(len(frame) - 1),
        "soc_start": float(frame["battery_soc"].iloc[0]),
        "soc_end": float(last["battery_soc"]),
        "soc_min": float(frame["battery_soc"].min()),
        "soc_max": float(frame["battery_soc"].max()),
        "peak_solar_kw": float(frame["solar_kw"].max()),
        "peak_consumption_kw": float(frame["consumption_kw"].max()),
        "peak_grid_import_kw": float(frame["grid_kw"].clip(lower=0.0).max()),
        "mean_losses_kw": float(frame["total_losses_kw"].mean()),
        "importing_share": float(frame["grid_importing"].mean()),
        "total_generated_kwh": float(last["total_generated_kwh"]),
        "total_consumed_kwh": float(last["total_consumed_kwh"]),
        "total_imported_kwh": float(last["total_imported_kwh"]),
        "total_exported_kwh": float(last["total_exported_kwh"]),
        "cost_savings": float(last["cost_savings"]),
        "co2_saved_kg": float(last["co2_saved_kg"]),
    }


def _plot_power_flows(frame: pd.DataFrame, save_path: Path) -> None:
    steps = frame["step"].to_numpy()
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(steps, frame["solar_kw"], label="Solar", color="#f2a900")
    ax.plot(steps, frame["consumption_kw"], label="Consumption", color="#d62728")
    ax.plot(steps, frame["battery_flow_kw"], label="Battery (+ discharge)", color="#2ca02c")
    ax.plot(steps, frame["grid_kw"], label="Grid (+ import)", color="#1f77b4")
    ax.axhline(0.0, color="black", linewidth=0.5)
    ax.set_xlabel("Tick")
    ax.set_ylabel("Power [kW]")
    ax.set_title("Power flows")
    ax.grid(True, alpha=0.2)
    ax.legend(loc="upper right")
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _plot_state_of_charge(frame: pd.DataFrame, save_path: Path) -> None:
    steps = frame["step"].to_numpy()
    soc = frame["battery_soc"].to_numpy(dtype=float)
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(steps, soc, color="#2ca02c")
    ax.fill_between(steps, 0.0, soc, color="#2ca02c", alpha=0.15)
    ax.set_ylim(0.0, 100.0)
    ax.set_xlabel("Tick")
    ax.set_ylabel("State of charge [%]")
    ax.set_title("Battery state of charge")
    ax.grid(True, alpha=0.2)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _plot_losses(frame: pd.DataFrame, save_path: Path) -> None:
    steps = frame["step"].to_numpy()
    losses_w = np.asarray(frame["total_losses_kw"], dtype=float) * 1000.0
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(steps, losses_w, color="#9467bd")
    ax.set_xlabel("Tick")
    ax.set_ylabel("Losses [W]")
    ax.set_title("Total system losses")
    ax.grid(True, alpha=0.2)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def generate_report(frame: pd.DataFrame, base_dir: Path | str = "results", name: str = "run") -> Path:
    """
    Write a trace report: CSV, summary JSON and plots.

    Args:
        frame: Trace produced by :func:`trace_frame`.
        base_dir: Parent directory; a ``<yymmdd_HHMM>_<name>`` folder is
            created inside it.
        name: Run label used in the folder name.

    Returns:
        Path of the created report directory.
    """
    output_dir = _create_results_directory(name, Path(base_dir))

    frame.to_csv(output_dir / "trace.csv", index=False)
    summary = summarize_trace(frame)
    (output_dir / "summary.json").write_text(json.dumps(summary, indent=2), encoding="utf-8")

    if not frame.empty:
        _plot_power_flows(frame, output_dir / "power_flows.png")
        _plot_state_of_charge(frame, output_dir / "state_of_charge.png")
        _plot_losses(frame, output_dir / "losses.png")

    logger.info("Report written to %s", output_dir)
    return output_dir
