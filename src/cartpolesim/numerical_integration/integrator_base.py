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
Integrator Base - State Ownership and Derivatives for Cart-Pole Integration

Defines the abstract base class shared by the cart-pole integrators, along
with the IntegrationMethod enum naming the closed set of fixed-step schemes.

The base class owns the model state vector, the timestep and the equations of
motion, validates all three at construction, and provides the derivative
evaluation that every scheme composes:

    d/dt [x, ẋ, θ, θ̇, (θ₂, θ̇₂)] = [ẋ, ẍ, θ̇, θ̈, (θ̇₂, θ̈₂)]

i.e. the velocity slots of the state become the position derivatives and the
computed accelerations become the velocity derivatives.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import numpy as np

from cartpolesim.types.core import ScalarLike, StateVector

if TYPE_CHECKING:
    from cartpolesim.physics import CartPoleEquations


class IntegrationMethod(Enum):
    """
    Fixed-step integration scheme.

    Attributes
    ----------
    EULER : str
        Explicit Euler, 1st order, one equations evaluation per step
    RK2 : str
        Heun's method, 2nd order, two evaluations per step
    RK4 : str
        Classic Runge-Kutta, 4th order, four evaluations per step
    """

    EULER = "euler"
    RK2 = "rk2"
    RK4 = "rk4"

    @property
    def order(self) -> int:
        return _METHOD_ORDER[self]

    @property
    def stages(self) -> int:
        """Number of equations-of-motion evaluations per step."""
        return _METHOD_STAGES[self]

    @property
    def display_name(self) -> str:
        return _METHOD_NAMES[self]

    @classmethod
    def from_value(cls, method: Union["IntegrationMethod", str]) -> "IntegrationMethod":
        """
        Resolve an enum member from a member or a case-insensitive name.

        Raises
        ------
        ValueError
            If the name is not a known method or alias

        Examples
        --------
        >>> IntegrationMethod.from_value("RK4")
        <IntegrationMethod.RK4: 'rk4'>
        >>> IntegrationMethod.from_value("heun")
        <IntegrationMethod.RK2: 'rk2'>
        """
        if isinstance(method, cls):
            return method
        if isinstance(method, str):
            key = method.strip().lower()
            if key in _METHOD_ALIASES:
                return _METHOD_ALIASES[key]
        raise ValueError(
            f"Unknown integration method {method!r}. "
            f"Choose from: {sorted(_METHOD_ALIASES.keys())}"
        )


_METHOD_ORDER = {
    IntegrationMethod.EULER: 1,
    IntegrationMethod.RK2: 2,
    IntegrationMethod.RK4: 4,
}

_METHOD_STAGES = {
    IntegrationMethod.EULER: 1,
    IntegrationMethod.RK2: 2,
    IntegrationMethod.RK4: 4,
}

_METHOD_NAMES = {
    IntegrationMethod.EULER: "Explicit Euler",
    IntegrationMethod.RK2: "Heun (RK2)",
    IntegrationMethod.RK4: "RK4 (Classic)",
}

_METHOD_ALIASES = {
    "euler": IntegrationMethod.EULER,
    "explicit_euler": IntegrationMethod.EULER,
    "rk2": IntegrationMethod.RK2,
    "heun": IntegrationMethod.RK2,
    "rk4": IntegrationMethod.RK4,
}


class IntegratorBase(ABC):
    """
    Abstract base class for cart-pole integrators.

    Owns the state vector exclusively: the initial state is copied into a
    private buffer of the equations' dtype, and is only exposed through a
    read-only view. All reads and writes use the fixed index layout of
    cartpolesim.types.core.

    Subclasses implement:
    - advance(): move the owned state forward by one timestep
    - name: integrator name for display

    Examples
    --------
    >>> integrator = CartPoleIntegrator(tau=0.01, state=[0.0, 0.0, 0.1, 0.0])
    >>> integrator.advance(0.0)
    >>> float(integrator.state[2]) > 0.1
    True
    """

    def __init__(
        self,
        equations: "CartPoleEquations",
        tau: ScalarLike,
        state: Optional[StateVector] = None,
    ):
        """
        Initialize integrator.

        Parameters
        ----------
        equations : CartSinglePoleEquations or CartDoublePoleEquations
            Equations of motion; also fix the state length and precision
        tau : float
            Timestep in seconds, positive and finite
        state : Optional[ArrayLike]
            Initial state; zeros if None. Copied, never aliased.

        Raises
        ------
        ValueError
            If tau is not positive and finite, or the state does not have
            the length the equations require
        """
        self.equations = equations
        self._dtype = equations.dtype
        self._tau = self._validate_tau(tau)
        self._state = self._validate_state(state)
        self._accel = np.zeros(equations.n_poles + 1, dtype=self._dtype)

        self._stats = {
            "total_steps": 0,
            "total_fev": 0,  # Equations-of-motion evaluations
        }

    # ========================================================================
    # Validation
    # ========================================================================

    def _validate_tau(self, tau: ScalarLike) -> np.floating:
        tau_value = float(tau)
        if not np.isfinite(tau_value) or tau_value <= 0.0:
            raise ValueError(f"Timestep tau must be positive and finite, got {tau!r}")

        # Checked again after the cast: float32 can underflow to 0 or overflow to inf
        with np.errstate(over="ignore", under="ignore"):
            tau_cast = self._dtype.type(tau_value)
        if not np.isfinite(tau_cast) or tau_cast <= 0:
            raise ValueError(
                f"Timestep tau={tau!r} is not representable as a positive finite "
                f"{self._dtype} value (got {tau_cast})"
            )
        return tau_cast

    def _validate_state(self, state: Optional[StateVector]) -> np.ndarray:
        expected = self.equations.state_size
        if state is None:
            return np.zeros(expected, dtype=self._dtype)

        state_array = np.asarray(state)
        if state_array.ndim != 1 or state_array.shape[0] != expected:
            raise ValueError(
                f"State vector for a {self.equations.n_poles}-pole model must have "
                f"length {expected}, got shape {state_array.shape}"
            )
        return np.array(state_array, dtype=self._dtype, copy=True)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def state(self) -> StateVector:
        """
        Read-only view of the current model state.

        The view tracks the integrator's buffer, so it reflects every later
        advance(). Copy it to keep a snapshot.
        """
        view = self._state.view()
        view.flags.writeable = False
        return view

    @property
    def tau(self) -> np.floating:
        return self._tau

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def n_poles(self) -> int:
        return self.equations.n_poles

    @property
    def state_size(self) -> int:
        return self.equations.state_size

    def set_state(self, state: StateVector) -> None:
        """
        Overwrite the owned state with a copy of the given state.

        Raises
        ------
        ValueError
            If the state does not have the required length
        """
        self._state[...] = self._validate_state(state)

    # ========================================================================
    # Abstract Interface
    # ========================================================================

    @abstractmethod
    def advance(self, force: ScalarLike = 0.0) -> None:
        """
        Move the owned state forward by one timestep, in place.

        Parameters
        ----------
        force : float
            External horizontal force on the cart, held constant over the step
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Get integrator name for display.

        Examples
        --------
        >>> integrator.name
        'RK4 (Classic)'
        """
        pass

    # ========================================================================
    # Common Utilities (Shared by All Integrators)
    # ========================================================================

    def _evaluate_accelerations(self, state: np.ndarray, force: np.floating) -> tuple:
        """Evaluate the equations of motion with statistics tracking."""
        self._stats["total_fev"] += 1
        return self.equations.compute_accelerations(state, force)

    def _derivative(self, state: np.ndarray, force: np.floating, out: np.ndarray) -> None:
        """
        Write the time derivative of state into out.

        out[0::2] are the position derivatives (the state's velocities) and
        out[1::2] the velocity derivatives (the computed accelerations).
        """
        out[1::2] = self._evaluate_accelerations(state, force)
        out[0::2] = state[1::2]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get integration statistics.

        Returns
        -------
        dict
            Statistics with keys:
            - 'total_steps': Total steps taken
            - 'total_fev': Total equations-of-motion evaluations
            - 'avg_fev_per_step': Average evaluations per step

        Examples
        --------
        >>> for _ in range(10):
        ...     integrator.advance(0.0)
        >>> integrator.get_stats()['total_fev']
        40
        """
        avg_fev = self._stats["total_fev"] / max(1, self._stats["total_steps"])

        return {
            **self._stats,
            "avg_fev_per_step": avg_fev,
        }

    def reset_stats(self):
        """Reset integration statistics to zero."""
        self._stats["total_steps"] = 0
        self._stats["total_fev"] = 0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"tau={float(self._tau)}, n_poles={self.n_poles}, "
            f"dtype={self._dtype})"
        )

    def __str__(self) -> str:
        return f"{self.name} (tau={float(self._tau):.4f}, {self._dtype})"


__all__ = ["IntegrationMethod", "IntegratorBase"]
