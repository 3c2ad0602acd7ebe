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

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

import numpy as np

from cartpolesim.types.core import (
    SINGLE_POLE_STATE_SIZE,
    FloatDType,
    ScalarLike,
    StateVector,
    resolve_dtype,
)


@dataclass(frozen=True)
class CartSinglePoleParameters:
    """
    Physical parameters of the single-pole cart-pole model.

    Parameters
    ----------
    gravity : float, default=9.8
        Magnitude of gravitational acceleration [m/s²]. Always positive, the
        direction is built into the equations.
    pole_mass : float, default=0.1
        Mass of the pole [kg]
    cart_mass : float, default=1.0
        Mass of the cart [kg]
    pole_length : float, default=1.0
        Full length of the pole [m] (not the half length)
    pivot_friction : float, default=0.001
        Friction coefficient at the pole's pivot joint
    track_friction : float, default=0.1
        Friction coefficient between cart and track
    """

    gravity: float = 9.8
    pole_mass: float = 0.1
    cart_mass: float = 1.0
    pole_length: float = 1.0
    pivot_friction: float = 0.001
    track_friction: float = 0.1

    @property
    def total_mass(self) -> float:
        """Combined mass of cart and pole."""
        return self.pole_mass + self.cart_mass


class CartSinglePoleEquations:
    """
    Equations of motion for the cart-pole model with a single pole.

    Physical System:
    ---------------
    A cart on a horizontal track with a hinged, unactuated pole. Friction acts
    at the pole pivot (mu_p) and between cart and track (mu_c). The pole angle
    is the clockwise deviation from the upright vertical, so theta = 0 is the
    unstable upright equilibrium and theta = π is hanging down.

    Dynamics:
    --------
    With l̂ the half pole length and M the combined mass:

        ẍ = (m·g·sinθ·cosθ - (7/3)·(F + m·l̂·θ̇²·sinθ - μc·ẋ) - μp·θ̇·cosθ/l̂)
            / (m·cos²θ - (7/3)·M)

        θ̈ = (3/(7·l̂)) · (g·sinθ - ẍ·cosθ - μp·θ̇/(m·l̂))

    All arithmetic is carried out in the dtype given at construction. No
    inputs are guarded; a vanishing denominator yields inf/NaN, which then
    propagates through the integrated state.

    Examples
    --------
    >>> equations = CartSinglePoleEquations()
    >>> state = np.array([0.0, 0.0, np.pi / 2, 0.0])
    >>> x_acc, theta_acc = equations.compute_accelerations(state, 0.0)
    >>> round(float(theta_acc), 6)
    8.4
    """

    n_poles: ClassVar[int] = 1
    state_size: ClassVar[int] = SINGLE_POLE_STATE_SIZE

    def __init__(
        self,
        parameters: Optional[CartSinglePoleParameters] = None,
        dtype: FloatDType = np.float64,
    ):
        self.parameters = parameters if parameters is not None else CartSinglePoleParameters()
        self.dtype = resolve_dtype(dtype)

        p = self.parameters
        f = self.dtype.type
        self._g = f(p.gravity)
        self._m = f(p.pole_mass)
        self._mu_p = f(p.pivot_friction)
        self._mu_c = f(p.track_friction)
        self._M = f(p.pole_mass) + f(p.cart_mass)
        self._l_hat = f(p.pole_length) / f(2.0)
        self._seven_thirds = f(7.0) / f(3.0)
        self._theta_scale = f(3.0) / (f(7.0) * self._l_hat)

    @property
    def half_pole_length(self):
        return self._l_hat

    @property
    def total_mass(self):
        return self._M

    def compute_accelerations(
        self, state: StateVector, force: ScalarLike
    ) -> Tuple[np.floating, np.floating]:
        """
        Calculate cart acceleration and pole angular acceleration.

        Parameters
        ----------
        state : np.ndarray
            Model state [x, x_dot, theta, theta_dot]; not modified
        force : float
            External horizontal force applied to the cart [N]

        Returns
        -------
        Tuple
            (cart acceleration [m/s²], pole angular acceleration [rad/s²])
        """
        f = self.dtype.type
        xv = f(state[1])
        theta = f(state[2])
        thetav = f(state[3])
        force = f(force)

        g, m, l_hat = self._g, self._m, self._l_hat
        mu_p, mu_c = self._mu_p, self._mu_c

        sin_theta = np.sin(theta)
        cos_theta = np.cos(theta)
        cos_theta_sqr = cos_theta * cos_theta
        thetav_sqr = thetav * thetav

        xa = (
            m * g * sin_theta * cos_theta
            - self._seven_thirds * (force + m * l_hat * thetav_sqr * sin_theta - mu_c * xv)
            - (mu_p * thetav * cos_theta) / l_hat
        ) / (m * cos_theta_sqr - self._seven_thirds * self._M)

        thetaa = self._theta_scale * (g * sin_theta - xa * cos_theta - (mu_p * thetav) / (m * l_hat))

        return xa, thetaa

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(parameters={self.parameters!r}, dtype={self.dtype})"


__all__ = ["CartSinglePoleParameters", "CartSinglePoleEquations"]
