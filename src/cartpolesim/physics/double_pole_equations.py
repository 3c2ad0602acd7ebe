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
    DOUBLE_POLE_STATE_SIZE,
    FloatDType,
    ScalarLike,
    StateVector,
    resolve_dtype,
)


@dataclass(frozen=True)
class CartDoublePoleParameters:
    """
    Physical parameters of the double-pole cart-pole model.

    Both poles are hinged directly on the cart, side by side.

    Parameters
    ----------
    gravity : float, default=9.8
        Magnitude of gravitational acceleration [m/s²]
    pole_mass : float, default=0.1
        Mass of pole 1 [kg]
    pole2_mass : float, default=0.01
        Mass of pole 2 [kg]
    cart_mass : float, default=1.0
        Mass of the cart [kg]
    pole_length : float, default=1.0
        Full length of pole 1 [m]
    pole2_length : float, default=0.1
        Full length of pole 2 [m]
    pivot_friction : float, default=0.001
        Friction coefficient at each pole's pivot joint
    track_friction : float, default=0.1
        Friction coefficient between cart and track
    """

    gravity: float = 9.8
    pole_mass: float = 0.1
    pole2_mass: float = 0.01
    cart_mass: float = 1.0
    pole_length: float = 1.0
    pole2_length: float = 0.1
    pivot_friction: float = 0.001
    track_friction: float = 0.1

    @property
    def total_mass(self) -> float:
        """Combined mass of cart and both poles."""
        return self.pole_mass + self.pole2_mass + self.cart_mass


class CartDoublePoleEquations:
    """
    Equations of motion for the cart-pole model with two poles.

    Extends the single-pole model: the second pole's mass and half length
    enter the cart acceleration additively in numerator and denominator, and
    each pole's angular acceleration follows from the shared cart
    acceleration using that pole's own angle, angular velocity and half
    length.

    Dynamics:
    --------
        ẍ = (g·(m·sinθ₁·cosθ₁ + m₂·sinθ₂·cosθ₂)
             - (7/3)·(F + m·l̂·θ̇₁²·sinθ₁ + m₂·l̂₂·θ̇₂²·sinθ₂ - μc·ẋ)
             - (μp·θ̇₁·cosθ₁/l̂ + μp·θ̇₂·cosθ₂/l̂₂))
            / (m·cos²θ₁ + m₂·cos²θ₂ - (7/3)·M)

        θ̈ᵢ = (3/(7·l̂ᵢ)) · (g·sinθᵢ - ẍ·cosθᵢ - μp·θ̇ᵢ/(mᵢ·l̂ᵢ))

    The 7/3 ratio is formed in the working dtype for both precisions.

    Examples
    --------
    >>> equations = CartDoublePoleEquations(dtype="float32")
    >>> state = np.zeros(6, dtype=np.float32)
    >>> [float(a) for a in equations.compute_accelerations(state, 0.0)]
    [-0.0, 0.0, 0.0]
    """

    n_poles: ClassVar[int] = 2
    state_size: ClassVar[int] = DOUBLE_POLE_STATE_SIZE

    def __init__(
        self,
        parameters: Optional[CartDoublePoleParameters] = None,
        dtype: FloatDType = np.float64,
    ):
        self.parameters = parameters if parameters is not None else CartDoublePoleParameters()
        self.dtype = resolve_dtype(dtype)

        p = self.parameters
        f = self.dtype.type
        self._g = f(p.gravity)
        self._m = f(p.pole_mass)
        self._m2 = f(p.pole2_mass)
        self._mu_p = f(p.pivot_friction)
        self._mu_c = f(p.track_friction)
        self._M = f(p.pole_mass) + f(p.pole2_mass) + f(p.cart_mass)
        self._l_hat = f(p.pole_length) / f(2.0)
        self._l2_hat = f(p.pole2_length) / f(2.0)
        self._seven_thirds = f(7.0) / f(3.0)
        self._theta1_scale = f(3.0) / (f(7.0) * self._l_hat)
        self._theta2_scale = f(3.0) / (f(7.0) * self._l2_hat)

    @property
    def half_pole_lengths(self):
        return self._l_hat, self._l2_hat

    @property
    def total_mass(self):
        return self._M

    def compute_accelerations(
        self, state: StateVector, force: ScalarLike
    ) -> Tuple[np.floating, np.floating, np.floating]:
        """
        Calculate cart acceleration and both pole angular accelerations.

        Parameters
        ----------
        state : np.ndarray
            Model state [x, x_dot, theta1, theta1_dot, theta2, theta2_dot];
            not modified
        force : float
            External horizontal force applied to the cart [N]

        Returns
        -------
        Tuple
            (cart acceleration, pole 1 angular acceleration,
            pole 2 angular acceleration)
        """
        f = self.dtype.type
        xv = f(state[1])
        theta = f(state[2])
        thetav = f(state[3])
        theta2 = f(state[4])
        thetav2 = f(state[5])
        force = f(force)

        g, m, m2 = self._g, self._m, self._m2
        l_hat, l2_hat = self._l_hat, self._l2_hat
        mu_p, mu_c = self._mu_p, self._mu_c

        # Pole 1
        sin_theta = np.sin(theta)
        cos_theta = np.cos(theta)
        cos_theta_sqr = cos_theta * cos_theta
        thetav_sqr = thetav * thetav

        # Pole 2
        sin_theta2 = np.sin(theta2)
        cos_theta2 = np.cos(theta2)
        cos_theta2_sqr = cos_theta2 * cos_theta2
        thetav2_sqr = thetav2 * thetav2

        xa = (
            g * ((m * sin_theta * cos_theta) + (m2 * sin_theta2 * cos_theta2))
            - self._seven_thirds
            * (
                force
                + (m * l_hat * thetav_sqr * sin_theta)
                + (m2 * l2_hat * thetav2_sqr * sin_theta2)
                - mu_c * xv
            )
            - (((mu_p * thetav * cos_theta) / l_hat) + ((mu_p * thetav2 * cos_theta2) / l2_hat))
        ) / ((m * cos_theta_sqr) + (m2 * cos_theta2_sqr) - self._seven_thirds * self._M)

        thetaa1 = self._theta1_scale * (
            g * sin_theta - xa * cos_theta - ((mu_p * thetav) / (m * l_hat))
        )
        thetaa2 = self._theta2_scale * (
            g * sin_theta2 - xa * cos_theta2 - ((mu_p * thetav2) / (m2 * l2_hat))
        )

        return xa, thetaa1, thetaa2

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(parameters={self.parameters!r}, dtype={self.dtype})"


__all__ = ["CartDoublePoleParameters", "CartDoublePoleEquations"]
