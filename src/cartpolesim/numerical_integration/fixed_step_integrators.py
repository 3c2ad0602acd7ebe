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
Fixed-Step Integrators for the Cart-Pole Model

Implements the classic fixed time-step schemes over the owned cart-pole
state:
- Explicit Euler (1st order)
- Heun / RK2 (2nd order)
- RK4 (4th order)

A single CartPoleIntegrator class covers every scheme, pole count and
precision. The scheme is chosen once at construction from IntegrationMethod
and only the working buffers that scheme needs are allocated. The buffers are
overwritten on every step and never leave the integrator.
"""

from typing import Optional, Union

import numpy as np

from cartpolesim.numerical_integration.integrator_base import (
    IntegrationMethod,
    IntegratorBase,
)
from cartpolesim.physics import (
    CartDoublePoleEquations,
    CartDoublePoleParameters,
    CartPoleEquations,
    CartPoleParameters,
    CartSinglePoleEquations,
    CartSinglePoleParameters,
    multiply_add,
)
from cartpolesim.types.core import FloatDType, ScalarLike, StateVector, resolve_dtype


class CartPoleIntegrator(IntegratorBase):
    """
    Fixed-step cart-pole integrator (Euler, Heun or classic RK4).

    Algorithms, with f the state derivative and τ the timestep:

    Euler:
        positions  += velocities·τ   (pre-update velocities)
        velocities += accelerations·τ

    RK2 (Heun):
        k1 = f(s)
        k2 = f(s + τ·k1)
        s += (k1 + k2)·τ/2

    RK4:
        k1 = f(s)
        k2 = f(s + (τ/2)·k1)
        k3 = f(s + (τ/2)·k2)
        k4 = f(s + τ·k3)
        s += (k1 + 2·k2 + 2·k3 + k4)·(τ/6)

    Characteristics:
    - Local truncation error O(τ²), O(τ³), O(τ⁵) respectively
    - RK4 is the default, used by the demo simulations
    - The applied force is held constant over each step

    Examples
    --------
    >>> # Single pole, double precision, RK4 (defaults)
    >>> integrator = CartPoleIntegrator(tau=1 / 6, state=[0.0, 0.0, np.pi / 2, 0.0])
    >>> integrator.advance(0.0)
    >>>
    >>> # Double pole, single precision, Euler
    >>> integrator = CartPoleIntegrator(
    ...     tau=0.01,
    ...     state=np.zeros(6),
    ...     equations=CartDoublePoleEquations(dtype="float32"),
    ...     method="euler",
    ... )
    >>> integrator.state.dtype
    dtype('float32')
    """

    def __init__(
        self,
        tau: ScalarLike,
        state: Optional[StateVector] = None,
        equations: Optional[CartPoleEquations] = None,
        method: Union[IntegrationMethod, str] = IntegrationMethod.RK4,
        dtype: Optional[FloatDType] = None,
    ):
        """
        Initialize cart-pole integrator.

        Parameters
        ----------
        tau : float
            Fixed timestep in seconds
        state : Optional[ArrayLike]
            Initial state (length 4 or 6 to match the equations); zeros if None
        equations : Optional[CartPoleEquations]
            Equations of motion; default-parameter single-pole equations if None
        method : IntegrationMethod or str
            'euler', 'rk2' ('heun') or 'rk4'
        dtype : Optional
            Working precision when equations is None. If equations is given,
            must match equations.dtype or be None.

        Raises
        ------
        ValueError
            If the method is unknown, dtype conflicts with the equations, tau
            is not positive, or the state length is wrong
        """
        self.method = IntegrationMethod.from_value(method)

        if equations is None:
            equations = CartSinglePoleEquations(
                dtype=resolve_dtype(dtype) if dtype is not None else np.float64
            )
        elif dtype is not None and resolve_dtype(dtype) != equations.dtype:
            raise ValueError(
                f"dtype {resolve_dtype(dtype)} conflicts with equations dtype {equations.dtype}"
            )

        super().__init__(equations, tau, state)

        f = self._dtype.type
        self._tau_half = self._tau / f(2.0)
        self._tau_sixth = self._tau / f(6.0)
        self._two = f(2.0)

        n = self.state_size
        if self.method is IntegrationMethod.RK2:
            self._k1 = np.zeros(n, dtype=self._dtype)
            self._k2 = np.zeros(n, dtype=self._dtype)
            self._s2 = np.zeros(n, dtype=self._dtype)
        elif self.method is IntegrationMethod.RK4:
            self._k1 = np.zeros(n, dtype=self._dtype)
            self._k2 = np.zeros(n, dtype=self._dtype)
            self._k3 = np.zeros(n, dtype=self._dtype)
            self._k4 = np.zeros(n, dtype=self._dtype)
            self._s = np.zeros(n, dtype=self._dtype)
            self._weighted = np.zeros(n, dtype=self._dtype)

        self._stepper = {
            IntegrationMethod.EULER: self._euler_step,
            IntegrationMethod.RK2: self._rk2_step,
            IntegrationMethod.RK4: self._rk4_step,
        }[self.method]

    def advance(self, force: ScalarLike = 0.0) -> None:
        """
        Move the owned state forward by one timestep, in place.

        Parameters
        ----------
        force : float
            External horizontal force on the cart [N], constant over the step

        Notes
        -----
        Non-finite states are not detected here; inf/NaN from a degenerate
        configuration propagate into the state. Use np.isfinite(state) to
        check for divergence.
        """
        self._stepper(self._dtype.type(force))
        self._stats["total_steps"] += 1

    def _euler_step(self, force: np.floating) -> None:
        state = self._state
        self._accel[:] = self._evaluate_accelerations(state, force)

        # Positions first, so they use the velocities at the start of the step
        multiply_add(state[0::2], state[0::2], state[1::2], self._tau)
        multiply_add(state[1::2], state[1::2], self._accel, self._tau)

    def _rk2_step(self, force: np.floating) -> None:
        state, k1, k2, s2 = self._state, self._k1, self._k2, self._s2

        self._derivative(state, force, k1)
        multiply_add(s2, state, k1, self._tau)
        self._derivative(s2, force, k2)

        # Mean gradient (k1 + k2) / 2, accumulated in k2
        np.add(k1, k2, out=k2)
        multiply_add(state, state, k2, self._tau_half)

    def _rk4_step(self, force: np.floating) -> None:
        state, s = self._state, self._s
        k1, k2, k3, k4 = self._k1, self._k2, self._k3, self._k4

        self._derivative(state, force, k1)

        multiply_add(s, state, k1, self._tau_half)
        self._derivative(s, force, k2)

        multiply_add(s, state, k2, self._tau_half)
        self._derivative(s, force, k3)

        multiply_add(s, state, k3, self._tau)
        self._derivative(s, force, k4)

        # ((k1 + 2·k2) + 2·k3) + k4; s is free again after the last stage
        weighted = self._weighted
        np.multiply(k2, self._two, out=weighted)
        np.add(k1, weighted, out=weighted)
        np.multiply(k3, self._two, out=s)
        np.add(weighted, s, out=weighted)
        np.add(weighted, k4, out=weighted)
        np.multiply(weighted, self._tau_sixth, out=weighted)
        np.add(state, weighted, out=state)

    @property
    def name(self) -> str:
        return self.method.display_name

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"method={self.method.value}, tau={float(self._tau)}, "
            f"n_poles={self.n_poles}, dtype={self._dtype})"
        )


# ============================================================================
# Utility: Quick Integrator Creation
# ============================================================================


def create_cartpole_integrator(
    method: Union[IntegrationMethod, str] = "rk4",
    n_poles: int = 1,
    tau: ScalarLike = 0.01,
    state: Optional[StateVector] = None,
    dtype: FloatDType = "float64",
    parameters: Optional[CartPoleParameters] = None,
) -> CartPoleIntegrator:
    """
    Quick factory for cart-pole integrators.

    Parameters
    ----------
    method : str
        'euler', 'rk2' ('heun') or 'rk4'
    n_poles : int
        1 or 2
    tau : float
        Timestep in seconds
    state : Optional[ArrayLike]
        Initial state; zeros if None
    dtype : str or dtype
        'float32'/'single' or 'float64'/'double'
    parameters : Optional
        CartSinglePoleParameters for n_poles=1, CartDoublePoleParameters for
        n_poles=2; defaults if None

    Returns
    -------
    CartPoleIntegrator
        Configured integrator

    Raises
    ------
    ValueError
        If n_poles is not 1 or 2, or the parameters belong to the other
        pole configuration

    Examples
    --------
    >>> integrator = create_cartpole_integrator('rk4', tau=1 / 6)
    >>> integrator = create_cartpole_integrator(
    ...     'euler', n_poles=2, tau=0.001, dtype='single'
    ... )
    """
    if n_poles == 1:
        if parameters is not None and not isinstance(parameters, CartSinglePoleParameters):
            raise ValueError(
                f"Single-pole model requires CartSinglePoleParameters, "
                f"got {type(parameters).__name__}"
            )
        equations = CartSinglePoleEquations(parameters, dtype=dtype)
    elif n_poles == 2:
        if parameters is not None and not isinstance(parameters, CartDoublePoleParameters):
            raise ValueError(
                f"Double-pole model requires CartDoublePoleParameters, "
                f"got {type(parameters).__name__}"
            )
        equations = CartDoublePoleEquations(parameters, dtype=dtype)
    else:
        raise ValueError(f"n_poles must be 1 or 2, got {n_poles!r}")

    return CartPoleIntegrator(tau, state, equations=equations, method=method)


# ============================================================================
# Module Exports
# ============================================================================

__all__ = [
    "CartPoleIntegrator",
    "create_cartpole_integrator",
]
