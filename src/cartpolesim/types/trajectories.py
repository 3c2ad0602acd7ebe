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
Trajectory and Simulation Result Types

Result types are TypedDict, so results can be indexed, unpacked and
serialized like plain dictionaries.

Shape Convention
----------------
Time-major ordering:
- t: (T,) - Time points
- x: (T, nx) - State at each time point, nx = 4 or 6

Usage
-----
>>> result: SimulationResult = simulator.run(force=0.0)
>>> theta = result["x"][:, POLE1_ANGLE]
>>> for t, x in zip(result["t"], result["x"]):
...     print(f"t={t:.3f}, theta={x[2]}")
"""

import numpy as np
from typing_extensions import TypedDict

TimeSeries = np.ndarray
"""
One recorded quantity over time, shape (T,).
"""

TimePoints = np.ndarray
"""
Recording times in seconds, shape (T,).
"""

StateTrajectory = np.ndarray
"""
Recorded states, shape (T, nx).
"""


class SimulationResult(TypedDict, total=False):
    """
    Result from a fixed-step cart-pole simulation run.

    Attributes
    ----------
    t : TimePoints
        Time of each recorded state (T,)
    x : StateTrajectory
        State recorded at each time point (T, nx), in the integrator's dtype
    success : bool
        False if the state became non-finite during the run
    message : str
        Status message
    nsteps : int
        Number of integration steps taken
    nfev : int
        Number of equations-of-motion evaluations during the run
    integration_time : float
        Wall-clock time of the run in seconds
    solver : str
        Name of the integration method
    n_poles : int
        1 or 2

    Examples
    --------
    >>> result = simulator.run()
    >>> result["x"].shape
    (90, 4)
    >>> result["solver"]
    'RK4 (Classic)'
    """

    t: TimePoints
    x: StateTrajectory
    success: bool
    message: str
    nsteps: int
    nfev: int
    integration_time: float
    solver: str
    n_poles: int


__all__ = [
    "TimeSeries",
    "TimePoints",
    "StateTrajectory",
    "SimulationResult",
]
