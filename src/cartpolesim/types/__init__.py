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
Type definitions for cartpolesim.
"""

from .core import (
    CART_POSITION,
    CART_VELOCITY,
    DOUBLE_POLE_STATE_SIZE,
    POLE1_ANGLE,
    POLE1_ANGULAR_VELOCITY,
    POLE2_ANGLE,
    POLE2_ANGULAR_VELOCITY,
    SINGLE_POLE_STATE_SIZE,
    SUPPORTED_DTYPES,
    FloatDType,
    ScalarLike,
    StateVector,
    resolve_dtype,
)
from .trajectories import SimulationResult, StateTrajectory, TimePoints, TimeSeries

__all__ = [
    "CART_POSITION",
    "CART_VELOCITY",
    "DOUBLE_POLE_STATE_SIZE",
    "POLE1_ANGLE",
    "POLE1_ANGULAR_VELOCITY",
    "POLE2_ANGLE",
    "POLE2_ANGULAR_VELOCITY",
    "SINGLE_POLE_STATE_SIZE",
    "SUPPORTED_DTYPES",
    "FloatDType",
    "ScalarLike",
    "StateVector",
    "resolve_dtype",
    "SimulationResult",
    "StateTrajectory",
    "TimePoints",
    "TimeSeries",
]
