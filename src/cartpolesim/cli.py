# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Command-line cart-pole simulator.

Runs an open-loop simulation and saves the recorded angles to CSV:

    python -m cartpolesim --poles 1 --method rk4 --tau 0.1666667 --duration 15
"""

import argparse
from pathlib import Path
from typing import List, Optional

import numpy as np

from cartpolesim.simulation import SimulationConfig, run_simulation, save_time_series_csv

_PRECISIONS = {"single": "float32", "double": "float64"}


def default_output_name(method: str, tau: float, precision: str) -> str:
    """
    Output filename in the form theta-RK4-tau0_1667-doubleprecision.csv.
    """
    tau_text = f"{tau:.4f}".rstrip("0").rstrip(".").replace(".", "_")
    return f"theta-{method.upper()}-tau{tau_text}-{precision}precision.csv"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartpolesim",
        description="Simulate the cart-pole model and save the pole angle time series",
    )
    parser.add_argument(
        "--poles",
        type=int,
        choices=[1, 2],
        default=1,
        help="Number of poles (default: 1)",
    )
    parser.add_argument(
        "--method",
        type=str.lower,
        choices=["euler", "rk2", "rk4"],
        default="rk4",
        help="Integration method (default: rk4)",
    )
    parser.add_argument(
        "--tau",
        type=float,
        default=1.0 / 6.0,
        help="Timestep in seconds (default: 1/6)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=15.0,
        help="Simulated duration in seconds (default: 15.0)",
    )
    parser.add_argument(
        "--precision",
        choices=sorted(_PRECISIONS),
        default="double",
        help="Floating-point precision (default: double)",
    )
    parser.add_argument(
        "--initial-angle",
        type=float,
        default=np.pi / 2.0,
        help="Initial angle of every pole in radians (default: pi/2)",
    )
    parser.add_argument(
        "--force",
        type=float,
        default=0.0,
        help="Constant horizontal force on the cart in newtons (default: 0.0)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="CSV output path (default: derived from method, tau and precision)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = SimulationConfig(
        n_poles=args.poles,
        method=args.method,
        tau=args.tau,
        duration=args.duration,
        dtype=_PRECISIONS[args.precision],
        initial_angle=args.initial_angle,
        force=args.force,
    )

    try:
        result = run_simulation(config)
    except ValueError as exc:
        parser.error(str(exc))

    output = args.output or Path(default_output_name(args.method, args.tau, args.precision))
    path = save_time_series_csv(output, result)

    print("Cart and Pole Model Simulator")
    print(
        f"{result['solver']}: {result['nsteps']} steps, "
        f"{result['nfev']} evaluations, {result['integration_time']:.3f}s -> {path}"
    )
    if not result["success"]:
        print(f"Warning: {result['message']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
