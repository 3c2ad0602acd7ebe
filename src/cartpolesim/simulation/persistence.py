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
CSV output for recorded cart-pole time series.

Formats:
    single pole:  time,theta
    double pole:  time,x,theta1,theta2

Time is written with three decimals; other columns use the shortest
representation that round-trips in the series' own precision.
"""

from pathlib import Path
from typing import Union

import numpy as np

from cartpolesim.types.core import CART_POSITION, POLE1_ANGLE, POLE2_ANGLE
from cartpolesim.types.trajectories import SimulationResult, TimePoints, TimeSeries

PathLike = Union[str, Path]


def _check_lengths(t: TimePoints, *series: TimeSeries) -> None:
    lengths = [len(t)] + [len(s) for s in series]
    if len(set(lengths)) != 1:
        raise ValueError(f"All time series must have the same length, got {lengths}")


def _write_rows(path: PathLike, header, columns) -> Path:
    path = Path(path)
    t, *values = columns
    table = np.column_stack(
        [[f"{float(v):.3f}" for v in t]] + [[str(v) for v in series] for series in values]
    )
    np.savetxt(path, table, fmt="%s", delimiter=",", header=",".join(header), comments="")
    return path


def save_single_pole_csv(path: PathLike, t: TimePoints, theta: TimeSeries) -> Path:
    """
    Write a single-pole angle series as time,theta rows.

    Raises
    ------
    ValueError
        If t and theta differ in length
    """
    _check_lengths(t, theta)
    return _write_rows(path, ["time", "theta"], [t, theta])


def save_double_pole_csv(
    path: PathLike,
    t: TimePoints,
    x: TimeSeries,
    theta1: TimeSeries,
    theta2: TimeSeries,
) -> Path:
    """
    Write double-pole series as time,x,theta1,theta2 rows.

    Raises
    ------
    ValueError
        If the series differ in length
    """
    _check_lengths(t, x, theta1, theta2)
    return _write_rows(path, ["time", "x", "theta1", "theta2"], [t, x, theta1, theta2])


def save_time_series_csv(path: PathLike, result: SimulationResult) -> Path:
    """
    Write a simulation result in the format for its pole count.

    Parameters
    ----------
    path : str or Path
        Output file, overwritten if present
    result : SimulationResult
        Result from CartPoleSimulator.run()

    Returns
    -------
    Path
        The file written

    Examples
    --------
    >>> result = run_simulation()
    >>> save_time_series_csv("theta-RK4-tau0_1667-doubleprecision.csv", result)
    """
    states = np.asarray(result["x"])
    n_poles = result.get("n_poles", 1 if states.shape[1] == 4 else 2)

    if n_poles == 1:
        return save_single_pole_csv(path, result["t"], states[:, POLE1_ANGLE])
    return save_double_pole_csv(
        path,
        result["t"],
        states[:, CART_POSITION],
        states[:, POLE1_ANGLE],
        states[:, POLE2_ANGLE],
    )


__all__ = [
    "save_single_pole_csv",
    "save_double_pole_csv",
    "save_time_series_csv",
]
