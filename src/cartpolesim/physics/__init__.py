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
Cart-Pole Physics
=================

Closed-form equations of motion for the single- and double-pole cart-pole
models, and the elementwise multiply-add used by the integrators.

>>> from cartpolesim.physics import CartSinglePoleEquations
>>> equations = CartSinglePoleEquations(dtype="float32")
>>> x_acc, theta_acc = equations.compute_accelerations(state, force=0.0)
"""

from typing import Union

from .array_maths import multiply_add
from .double_pole_equations import CartDoublePoleEquations, CartDoublePoleParameters
from .single_pole_equations import CartSinglePoleEquations, CartSinglePoleParameters

CartPoleEquations = Union[CartSinglePoleEquations, CartDoublePoleEquations]
CartPoleParameters = Union[CartSinglePoleParameters, CartDoublePoleParameters]

__all__ = [
    "multiply_add",
    "CartSinglePoleEquations",
    "CartSinglePoleParameters",
    "CartDoublePoleEquations",
    "CartDoublePoleParameters",
    "CartPoleEquations",
    "CartPoleParameters",
]
