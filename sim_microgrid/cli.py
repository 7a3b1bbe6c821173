from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Sequence

from .config import configure_logging, get_snapshot_name, parse_log_level
from .db.session import init_db
from .host import SimulationHost
from .persistence import PersistenceService
from .reporting import generate_report, summarize_trace, trace_frame
from .serialization import snapshot_to_dict
from .simulation.battery import bank_flow
from .simulation.commands import (
    SetBatteryConfig,
    SetSolarPanelCount,
    SetTime,
    SetTimeSpeed,
    SetWeather,
    ToggleAppliance,
)
from .simulation.engine import initial_state
from .simulation.models import BatterySize, SimulationState, Weather

logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser used by entry points.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(description="Household microgrid simulator CLI")
    parser.add_argument("--log-level", default=None, help="Override SIM_MICROGRID_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Run the simulation headlessly and write a trace report")
    run.add_argument("--hours", type=float, default=24.0, help="Simulated hours to run")
    run.add_argument("--step-ms", type=float, default=1000.0, dest="step_ms", help="Wall-clock ms per tick")
    run.add_argument("--speed", type=float, default=None, help="Time speed multiplier")
    start_group = run.add_mutually_exclusive_group()
    start_group.add_argument("--time", type=float, default=None, help="Start time of day (hours)")
    start_group.add_argument(
        "--weather",
        choices=[w.value for w in Weather],
        default=None,
        help="Force a weather condition (snaps the clock to its canonical hour)",
    )
    run.add_argument("--panels", type=int, default=None, help="Number of solar panels")
    run.add_argument(
        "--battery-size",
        choices=[s.value for s in BatterySize],
        default=None,
        dest="battery_size",
    )
    run.add_argument("--battery-count", type=int, default=None, dest="battery_count")
    run.add_argument(
        "--appliance",
        action="append",
        default=[],
        help="Appliance id to toggle before running (repeatable)",
    )
    run.add_argument(
        "--from-state",
        action="store_true",
        dest="from_state",
        help="Start from the persisted snapshot instead of the initial state",
    )
    run.add_argument(
        "--persist",
        action="store_true",
        help="Store the final snapshot in the database",
    )
    run.add_argument("--name", default="run", help="Label used for the report folder")
    run.add_argument("--output-dir", default="results", dest="output_dir")
    run.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write the report to disk",
    )

    state = sub.add_parser("state", help="Inspect or reset persisted snapshots")
    state_sub = state.add_subparsers(dest="state_command")

    state_show = state_sub.add_parser("show", help="Print a persisted snapshot")
    state_show.add_argument("--name", default=None, help="Snapshot slot (default from env)")
    state_show.add_argument(
        "--json",
        action="store_true",
        help="Print the complete snapshot as JSON",
    )

    state_sub.add_parser("list", help="List persisted snapshot slots")

    state_reset = state_sub.add_parser("reset", help="Overwrite a slot with the initial state")
    state_reset.add_argument("--name", default=None)

    serve = sub.add_parser("serve", help="Serve the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def _state_overview(state: SimulationState) -> dict[str, Any]:
    return {
        "current_time": round(state.current_time, 3),
        "weather": state.weather.value,
        "is_paused": state.is_paused,
        "ambient_temperature_c": state.ambient_temperature,
        "solar_kw": state.solar.current_power,
        "consumption_kw": state.consumption.total_power,
        "battery_count": len(state.batteries),
        "battery_capacity_kwh": state.battery.capacity,
        "battery_soc": state.battery.state_of_charge,
        "battery_flow_kw": bank_flow(state.battery),
        "grid_kw": state.grid.current_flow,
        "total_losses_kw": state.losses.total_losses,
        "total_efficiency_pct": state.system.total_efficiency,
        "energy_balance_kw": state.system.energy_balance,
        "statistics": snapshot_to_dict(state)["statistics"],
    }


def _configure_run(host: SimulationHost, args: argparse.Namespace) -> None:
    if args.panels is not None:
        host.dispatch(SetSolarPanelCount(args.panels))
    if args.battery_size is not None or args.battery_count is not None:
        size = BatterySize(args.battery_size) if args.battery_size else host.state.batteries[0].size
        count = args.battery_count if args.battery_count is not None else len(host.state.batteries)
        host.dispatch(SetBatteryConfig(size=size, count=count))
    for appliance_id in args.appliance:
        host.dispatch(ToggleAppliance(appliance_id))
    if args.speed is not None:
        host.dispatch(SetTimeSpeed(args.speed))
    if args.time is not None:
        host.dispatch(SetTime(args.time))
    if args.weather is not None:
        host.dispatch(SetWeather(Weather(args.weather)))


def _run(args: argparse.Namespace, persistence: PersistenceService) -> None:
    start = persistence.load_snapshot() if args.from_state else None
    host = SimulationHost(
        state=start or initial_state(),
        persistence=persistence if args.persist else None,
    )
    _configure_run(host, args)
    logger.info(
        "Running %.2f simulated hours from t=%.2fh (%s)",
        args.hours,
        host.state.current_time,
        host.state.weather.value,
    )
    try:
        snapshots = host.run(args.hours, args.step_ms)
    except ValueError as exc:
        raise SystemExit(f"Cannot run simulation: {exc}") from exc

    frame = trace_frame(snapshots)
    summary = summarize_trace(frame)
    if not args.no_save:
        output_dir = generate_report(frame, base_dir=args.output_dir, name=args.name)
        summary["report_dir"] = str(output_dir)
    _print_json(summary)


def main(argv: Sequence[str] | None = None, persistence: PersistenceService | None = None) -> None:
    """
    CLI entry point for headless runs and snapshot management.

    Args:
        argv: Optional sequence of CLI args (defaults to sys.argv).
        persistence: Optional service override; a default database-backed
            service is created when omitted.
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    configure_logging(parse_log_level(args.log_level) if args.log_level else None)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("sim_microgrid.api.app:app", host=args.host, port=args.port)
        return

    if persistence is None:
        init_db()
        persistence = PersistenceService()

    if args.command == "run":
        _run(args, persistence)
        return

    if args.command == "state":
        if not args.state_command:
            parser.error("Specify a state sub-command (show/list/reset).")

        if args.state_command == "list":
            _print_json(
                [
                    {
                        "name": record.name,
                        "current_time": record.current_time,
                        "state_of_charge": record.state_of_charge,
                        "updated_at": record.updated_at,
                    }
                    for record in persistence.list_snapshots()
                ]
            )
            return

        name = args.name or get_snapshot_name()
        if args.state_command == "show":
            state = persistence.load_snapshot(name)
            if state is None:
                raise SystemExit(f"No snapshot stored under '{name}'.")
            _print_json(snapshot_to_dict(state) if args.json else _state_overview(state))
            return

        if args.state_command == "reset":
            persistence.save_snapshot(initial_state(), name)
            print(f"Snapshot '{name}' reset to the initial state.")
            return

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    main()
