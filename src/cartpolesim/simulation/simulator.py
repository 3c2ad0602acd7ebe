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
Cart-Pole Simulation Driver

Runs an integrator for a fixed duration and records the state at every
timestep into time-major arrays.

The recorded state at index k is the state *before* the k-th advance, so the
first row is the initial state at t = 0 and the state after the final step is
not recorded.
"""

import time
import warnings
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import numpy as np

from cartpolesim.numerical_integration import (
    IntegratorBase,
    create_cartpole_integrator,
)
from cartpolesim.types.core import ScalarLike
from cartpolesim.types.trajectories import SimulationResult

ForceInput = Union[ScalarLike, Callable[[float], ScalarLike]]


@dataclass(frozen=True)
class SimulationConfig:
    """
    Configuration for a single simulation run.

    Defaults reproduce the demo run: one pole released from the
    horizontal (π/2 rad) with zero force, RK4, τ = 1/6 s, for 15 s.

    Attributes
    ----------
    n_poles : int
        1 or 2
    method : str
        'euler', 'rk2' or 'rk4'
    tau : float
        Timestep in seconds
    duration : float
        Simulated time in seconds
    dtype : str
        'float32'/'single' or 'float64'/'double'
    initial_angle : float
        Initial angle of every pole [rad]; ignored if initial_state is set
    initial_state : Optional[Sequence[float]]
        Full initial state, overriding initial_angle
    force : float
        Constant horizontal force on the cart [N]
    """

    n_poles: int = 1
    method: str = "rk4"
    tau: float = 1.0 / 6.0
    duration: float = 15.0
    dtype: str = "float64"
    initial_angle: float = np.pi / 2.0
    initial_state: Optional[Sequence[float]] = None
    force: float = 0.0

    def build_initial_state(self) -> np.ndarray:
        """Initial state vector: zeros with each pole angle set to initial_angle."""
        if self.initial_state is not None:
            return np.asarray(self.initial_state, dtype=np.float64)
        state = np.zeros(2 + 2 * self.n_poles)
        state[2::2] = self.initial_angle
        return state


def _warn_divergence(step: int, t: float) -> None:
    warnings.warn(
        f"Cart-pole state became non-finite at step {step} (t={t:.3f}s)",
        RuntimeWarning,
        stacklevel=3,
    )


class CartPoleSimulator:
    """
    Drives an integrator for a fixed duration and records its trajectory.

    The number of steps is floor(duration / tau), evaluated in the
    integrator's precision.

    Examples
    --------
    >>> integrator = create_cartpole_integrator('rk4', tau=1 / 6,
    ...                                         state=[0, 0, np.pi / 2, 0])
    >>> simulator = CartPoleSimulator(integrator, duration=15.0)
    >>> result = simulator.run(force=0.0)
    >>> result["x"].shape
    (90, 4)
    """

    def __init__(self, integrator: IntegratorBase, duration: ScalarLike):
        duration_value = float(duration)
        if not np.isfinite(duration_value) or duration_value <= 0.0:
            raise ValueError(f"Duration must be positive and finite, got {duration!r}")

        self.integrator = integrator
        self.duration = duration_value
        f = integrator.dtype.type
        with np.errstate(over="ignore"):
            steps = f(duration_value) / integrator.tau
        if not np.isfinite(steps):
            raise ValueError(
                f"Duration {duration!r} over tau={float(integrator.tau)!r} gives a "
                f"step count that overflows {integrator.dtype}"
            )
        self.timesteps = int(steps)

    def run(self, force: ForceInput = 0.0) -> SimulationResult:
        """
        Run the simulation, advancing the integrator timesteps times.

        Parameters
        ----------
        force : float or Callable[[float], float]
            Constant force, or an open-loop schedule force(t) evaluated at the
            start of each step

        Returns
        -------
        SimulationResult
            TypedDict with t (T,), x (T, nx) and run diagnostics

        Warns
        -----
        RuntimeWarning
            Once, if the state becomes non-finite. The run still completes.
        """
        integrator = self.integrator
        tau = float(integrator.tau)
        n = self.timesteps
        force_func = force if callable(force) else None

        t_series = np.arange(n, dtype=np.float64) * tau
        x_series = np.empty((n, integrator.state_size), dtype=integrator.dtype)
        state = integrator.state

        fev_start = integrator.get_stats()["total_fev"]
        diverged_at = None
        start_time = time.time()

        for k in range(n):
            x_series[k] = state
            if diverged_at is None and not np.all(np.isfinite(state)):
                diverged_at = k
                _warn_divergence(k, k * tau)
            u = force_func(float(t_series[k])) if force_func is not None else force
            integrator.advance(u)

        # The state after the final advance is not recorded but still checked
        if diverged_at is None and not np.all(np.isfinite(state)):
            diverged_at = n
            _warn_divergence(n, n * tau)

        elapsed = time.time() - start_time

        if diverged_at is None:
            message = f"{integrator.name} simulation completed"
        else:
            message = f"State diverged at step {diverged_at}"

        result: SimulationResult = {
            "t": t_series,
            "x": x_series,
            "success": diverged_at is None,
            "message": message,
            "nsteps": n,
            "nfev": integrator.get_stats()["total_fev"] - fev_start,
            "integration_time": elapsed,
            "solver": integrator.name,
            "n_poles": integrator.n_poles,
        }

        return result


def run_simulation(config: Optional[SimulationConfig] = None) -> SimulationResult:
    """
    Build an integrator and simulator from a config and run it.

    Examples
    --------
    >>> result = run_simulation(SimulationConfig(n_poles=2, tau=0.01, duration=5.0))
    >>> result["nsteps"]
    500
    """
    config = config or SimulationConfig()
    integrator = create_cartpole_integrator(
        method=config.method,
        n_poles=config.n_poles,
        tau=config.tau,
        state=config.build_initial_state(),
        dtype=config.dtype,
    )
    simulator = CartPoleSimulator(integrator, config.duration)
    return simulator.run(force=config.force)


__all__ = [
    "ForceInput",
    "SimulationConfig",
    "CartPoleSimulator",
    "run_simulation",
]
