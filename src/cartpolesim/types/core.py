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
Core Types for Cart-Pole Simulation

Type aliases and state layout constants shared by the equations of motion,
the integrators and the simulation driver.

State Layout
------------
Single pole (length 4):
    [0] x          cart position [m]
    [1] x_dot      cart velocity [m/s]
    [2] theta      pole angle [rad], clockwise deviation from upright
    [3] theta_dot  pole angular velocity [rad/s]

Double pole (length 6):
    [0] x, [1] x_dot,
    [2] theta1, [3] theta1_dot,
    [4] theta2, [5] theta2_dot

Position-like slots are the even indices and velocity-like slots the odd
indices. The integrators rely on this interleaving when forming derivatives.

Usage
-----
>>> from cartpolesim.types.core import StateVector, resolve_dtype
>>> dtype = resolve_dtype("float32")
>>> state: StateVector = np.zeros(4, dtype=dtype)
"""

from typing import Union

import numpy as np

# ============================================================================
# Array and Scalar Types
# ============================================================================

StateVector = np.ndarray
"""
Cart-pole state vector, 1-D array of length 4 (single pole) or 6 (double pole).

Always a float32 or float64 numpy array. See the module docstring for the
index layout.
"""

ScalarLike = Union[float, int, np.floating, np.integer]
"""
Scalar numeric value (timestep, force, physical parameter).
"""

FloatDType = Union[str, type, np.dtype]
"""
Floating-point precision specifier.

Accepted forms: ``"float32"``/``"single"``, ``"float64"``/``"double"``,
``np.float32``, ``np.float64`` or the corresponding ``np.dtype``.
"""

# ============================================================================
# State Layout
# ============================================================================

CART_POSITION = 0
CART_VELOCITY = 1
POLE1_ANGLE = 2
POLE1_ANGULAR_VELOCITY = 3
POLE2_ANGLE = 4
POLE2_ANGULAR_VELOCITY = 5

SINGLE_POLE_STATE_SIZE = 4
DOUBLE_POLE_STATE_SIZE = 6

SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))

_DTYPE_ALIASES = {
    "single": np.float32,
    "float32": np.float32,
    "double": np.float64,
    "float64": np.float64,
}


def resolve_dtype(dtype: FloatDType) -> np.dtype:
    """
    Normalize a precision specifier to a supported numpy dtype.

    Parameters
    ----------
    dtype : FloatDType
        Precision name, numpy scalar type or dtype

    Returns
    -------
    np.dtype
        ``np.dtype(np.float32)`` or ``np.dtype(np.float64)``

    Raises
    ------
    ValueError
        If the specifier does not name single or double precision

    Examples
    --------
    >>> resolve_dtype("single")
    dtype('float32')
    >>> resolve_dtype(np.float64)
    dtype('float64')
    """
    if isinstance(dtype, str):
        key = dtype.lower()
        if key not in _DTYPE_ALIASES:
            raise ValueError(
                f"Unknown precision '{dtype}'. "
                f"Choose from: {sorted(_DTYPE_ALIASES.keys())}"
            )
        return np.dtype(_DTYPE_ALIASES[key])

    try:
        resolved = np.dtype(dtype)
    except TypeError as exc:
        raise ValueError(f"Invalid precision specifier {dtype!r}") from exc

    if resolved not in SUPPORTED_DTYPES:
        raise ValueError(
            f"Unsupported dtype {resolved}. Must be one of "
            f"{[str(d) for d in SUPPORTED_DTYPES]}"
        )
    return resolved


__all__ = [
    "StateVector",
    "ScalarLike",
    "FloatDType",
    "CART_POSITION",
    "CART_VELOCITY",
    "POLE1_ANGLE",
    "POLE1_ANGULAR_VELOCITY",
    "POLE2_ANGLE",
    "POLE2_ANGULAR_VELOCITY",
    "SINGLE_POLE_STATE_SIZE",
    "DOUBLE_POLE_STATE_SIZE",
    "SUPPORTED_DTYPES",
    "resolve_dtype",
]
