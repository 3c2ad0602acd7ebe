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
cartpolesim
===========

Single- and double-pole cart-pole physics with fixed-step Euler, RK2 and RK4
integration in single or double precision.

>>> import numpy as np
>>> from cartpolesim import create_cartpole_integrator
>>>
>>> integrator = create_cartpole_integrator('rk4', tau=1 / 6,
...                                         state=[0.0, 0.0, np.pi / 2, 0.0])
>>> for _ in range(90):
...     integrator.advance(0.0)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from .numerical_integration import (
    CartPoleIntegrator,
    IntegrationMethod,
    IntegratorBase,
    create_cartpole_integrator,
)
from .physics import (
    CartDoublePoleEquations,
    CartDoublePoleParameters,
    CartSinglePoleEquations,
    CartSinglePoleParameters,
    multiply_add,
)
from .simulation import (
    CartPoleSimulator,
    SimulationConfig,
    run_simulation,
    save_time_series_csv,
)

__version__ = "0.1.0"

__all__ = [
    "CartPoleIntegrator",
    "IntegrationMethod",
    "IntegratorBase",
    "create_cartpole_integrator",
    "CartDoublePoleEquations",
    "CartDoublePoleParameters",
    "CartSinglePoleEquations",
    "CartSinglePoleParameters",
    "multiply_add",
    "CartPoleSimulator",
    "SimulationConfig",
    "run_simulation",
    "save_time_series_csv",
]
