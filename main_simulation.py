from __future__ import annotations

from sim_microgrid import generate_report, trace_frame
from sim_microgrid.host import SimulationHost
from sim_microgrid.simulation.commands import SetTime, SetTimeSpeed, ToggleAppliance


def main() -> None:
    host = SimulationHost()
    host.dispatch(SetTime(0.0))
    host.dispatch(SetTimeSpeed(60.0))
    for appliance_id in ("light-1", "tv", "washer"):
        host.dispatch(ToggleAppliance(appliance_id))

    snapshots = host.run(duration_hours=24.0, step_ms=1000.0)
    output_dir = generate_report(trace_frame(snapshots), base_dir="results", name="default_day")
    print(f"Report saved to: {output_dir}")


if __name__ == "__main__":
    main()
