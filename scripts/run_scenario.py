"""CLI for running offline elevator dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from simulation import ElevatorSystem, SystemConfig


def build_system(config: Dict) -> ElevatorSystem:
    system_config = SystemConfig.from_dict(config.get("system", {}))
    scheduler_cfg = config.get("scheduler", {})
    return ElevatorSystem(
        system_config,
        scheduler_name=scheduler_cfg.get("name", "weighted"),
        scheduler_options=scheduler_cfg.get("options", {}),
        random_seed=config.get("random_seed"),
    )


def _schedule_requests(requests: Iterable[Dict]) -> Dict[int, List[Dict]]:
    by_time: Dict[int, List[Dict]] = defaultdict(list)
    for request in requests:
        by_time[request.get("time", 0)].append(request)
    return by_time


def run_scenario(system: ElevatorSystem, config: Dict) -> List[Dict]:
    duration = config.get("duration", 60)
    random_every = config.get("random_request_every")
    scripted = _schedule_requests(config.get("requests", []))
    assignments: List[Dict] = []

    for _ in range(duration):
        now = system.current_time
        for request in scripted.get(now, []):
            result = system.submit_request(request["from_floor"], request["to_floor"])
            assignments.append({"time": now, **result.to_dict()})
        if random_every and now % random_every == 0:
            result = system.spawn_random_request()
            assignments.append({"time": now, **result.to_dict()})
        system.advance_tick()
    return assignments


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write assignments and the final snapshot as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every dispatch decision")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    system = build_system(config)
    assignments = run_scenario(system, config)
    snapshot = system.get_snapshot()

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": system.current_time,
        "stats": {
            "requests_submitted": system.stats.requests_submitted,
            "requests_rejected": system.stats.requests_rejected,
        },
        "assignments": assignments,
        "final_state": snapshot.to_dict(),
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Duration: {results['duration']} ticks")
    print(f"Requests: {system.stats.requests_submitted} assigned, {system.stats.requests_rejected} rejected")
    print("Final elevators:")
    for elevator in snapshot.elevators:
        print(
            f"  #{elevator.elevator_id}: floor {elevator.current_floor}, {elevator.status.value}, "
            f"{len(elevator.requests)} pending, targets {list(elevator.target_floors)}"
        )
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
