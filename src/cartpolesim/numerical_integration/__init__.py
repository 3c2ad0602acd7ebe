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
Numerical Integration
=====================

Fixed-step integrators for the cart-pole equations of motion.

>>> from cartpolesim.numerical_integration import (
...     CartPoleIntegrator,
...     IntegrationMethod,
...     create_cartpole_integrator,
... )
>>>
>>> integrator = create_cartpole_integrator('rk4', n_poles=2, tau=0.01)
>>> for _ in range(100):
...     integrator.advance(0.0)

Supported Methods
-----------------
- 'euler': Explicit Euler (1st order)
- 'rk2': Heun's method (2nd order)
- 'rk4': Classic Runge-Kutta (4th order, default)

Each in float32 or float64 precision, for one or two poles.
"""

from .fixed_step_integrators import CartPoleIntegrator, create_cartpole_integrator
from .integrator_base import IntegrationMethod, IntegratorBase

__all__ = [
    "CartPoleIntegrator",
    "IntegrationMethod",
    "IntegratorBase",
    "create_cartpole_integrator",
]
