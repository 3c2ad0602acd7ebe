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
Elementwise multiply-add over fixed-length state buffers.
"""

import math
from fractions import Fraction

import numpy as np

from cartpolesim.types.core import ScalarLike


def multiply_add(
    dest: np.ndarray, addend: np.ndarray, a: np.ndarray, scalar: ScalarLike
) -> None:
    """
    Compute dest[i] = a[i] * scalar + addend[i] for all i, in place.

    Parameters
    ----------
    dest : np.ndarray
        1-D destination buffer (may be a strided view, may alias addend or a)
    addend : np.ndarray
        Values added pointwise to the product
    a : np.ndarray
        Values multiplied by scalar
    scalar : float
        Scalar multiplier

    Raises
    ------
    ValueError
        If the buffers are not 1-D or have different lengths. Nothing is
        written to dest in that case.

    Notes
    -----
    Float64 results are fused: a[i] * scalar + addend[i] is formed exactly
    with rational arithmetic and rounded once. Non-finite operands take the
    ordinary floating-point path, which propagates inf and NaN the same way.

    For float32 destinations the product and sum are formed in float64 and
    rounded once on assignment. The float32 product is exact in float64, so
    this matches a fused multiply-add up to rare double-rounding ties.

    Examples
    --------
    >>> dest = np.empty(4)
    >>> multiply_add(dest, np.ones(4), np.arange(4.0), 0.5)
    >>> dest
    array([1. , 1.5, 2. , 2.5])
    """
    if dest.ndim != 1 or addend.ndim != 1 or a.ndim != 1:
        raise ValueError(
            f"dest, addend, and a must be 1-D, got ndim "
            f"{dest.ndim}, {addend.ndim}, {a.ndim}"
        )
    if not (dest.shape[0] == addend.shape[0] == a.shape[0]):
        raise ValueError(
            f"dest, addend, and a must have the same length, got "
            f"{dest.shape[0]}, {addend.shape[0]}, {a.shape[0]}"
        )

    if dest.dtype == np.float32:
        dest[...] = np.multiply(a, scalar, dtype=np.float64) + addend
    else:
        dest[...] = _fused_multiply_add(a, scalar, addend)


def _fused_multiply_add(a: np.ndarray, scalar: ScalarLike, addend: np.ndarray) -> np.ndarray:
    """Correctly rounded float64 a * scalar + addend."""
    s = float(scalar)
    s_exact = Fraction(s) if math.isfinite(s) else None
    out = np.empty(a.shape[0], dtype=np.float64)

    for i, (x, c) in enumerate(zip(a.tolist(), addend.tolist())):
        if s_exact is None or not (math.isfinite(x) and math.isfinite(c)):
            out[i] = x * s + c
            continue

        exact = Fraction(x) * s_exact + Fraction(c)
        if exact == 0:
            # Product equals -c exactly, so the plain sum is exact and carries the IEEE zero sign
            out[i] = x * s + c
            continue
        try:
            out[i] = float(exact)
        except OverflowError:
            out[i] = math.inf if exact > 0 else -math.inf

    return out


__all__ = ["multiply_add"]
