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
Unit tests for the double-pole equations of motion.

Tests cover:
1. Parameter defaults
2. Equilibrium and hand-computed values
3. Agreement with an exact symbolic evaluation (SymPy)
4. Single precision agrees with double precision
"""

import numpy as np
import pytest
import sympy as sp

from cartpolesim.physics import CartDoublePoleEquations, CartDoublePoleParameters


def symbolic_accelerations(params: CartDoublePoleParameters):
    """Closed-form double-pole accelerations with exact rational parameters."""
    xv, th1, thv1, th2, thv2, F = sp.symbols("x_dot th1 thv1 th2 thv2 F", real=True)

    def q(value):
        return sp.Rational(str(value))

    g = q(params.gravity)
    m1, m2, m_c = q(params.pole_mass), q(params.pole2_mass), q(params.cart_mass)
    l1, l2 = q(params.pole_length) / 2, q(params.pole2_length) / 2
    mu_p, mu_c = q(params.pivot_friction), q(params.track_friction)
    M = m1 + m2 + m_c
    k = sp.Rational(7, 3)

    xa = (
        g * (m1 * sp.sin(th1) * sp.cos(th1) + m2 * sp.sin(th2) * sp.cos(th2))
        - k * (F + m1 * l1 * thv1**2 * sp.sin(th1) + m2 * l2 * thv2**2 * sp.sin(th2) - mu_c * xv)
        - (mu_p * thv1 * sp.cos(th1) / l1 + mu_p * thv2 * sp.cos(th2) / l2)
    ) / (m1 * sp.cos(th1) ** 2 + m2 * sp.cos(th2) ** 2 - k * M)
    tha1 = 3 / (7 * l1) * (g * sp.sin(th1) - xa * sp.cos(th1) - mu_p * thv1 / (m1 * l1))
    tha2 = 3 / (7 * l2) * (g * sp.sin(th2) - xa * sp.cos(th2) - mu_p * thv2 / (m2 * l2))

    return sp.lambdify((xv, th1, thv1, th2, thv2, F), (xa, tha1, tha2), modules="mpmath")


class TestDoublePoleParameters:
    """Test parameter defaults and derived quantities"""

    def test_defaults(self):
        p = CartDoublePoleParameters()
        assert p.pole2_mass == 0.01
        assert p.pole2_length == 0.1
        assert p.total_mass == pytest.approx(1.11)

    def test_derived_quantities(self):
        equations = CartDoublePoleEquations()
        assert equations.half_pole_lengths == (0.5, 0.05)
        assert equations.state_size == 6
        assert equations.n_poles == 2


class TestDoublePoleValues:
    """Test accelerations at known states"""

    @pytest.mark.parametrize("dtype", [np.float32, np.float64])
    def test_upright_at_rest_is_equilibrium(self, dtype):
        equations = CartDoublePoleEquations(dtype=dtype)

        accels = equations.compute_accelerations(np.zeros(6, dtype=dtype), 0.0)

        assert all(a == 0.0 for a in accels)
        assert all(isinstance(a, dtype) for a in accels)

    def test_horizontal_first_pole(self):
        """Pole 1 horizontal at rest: it falls at 8.4 rad/s², pole 2 barely moves"""
        equations = CartDoublePoleEquations()
        state = np.array([0.0, 0.0, np.pi / 2, 0.0, 0.0, 0.0])

        xa, tha1, tha2 = equations.compute_accelerations(state, 0.0)

        assert abs(xa) < 1e-15
        np.testing.assert_allclose(tha1, 8.4, rtol=1e-14)
        assert abs(tha2) < 1e-12

    def test_short_pole_falls_faster(self):
        """Same tilt on both poles: the shorter pole has the larger angular acceleration"""
        equations = CartDoublePoleEquations()
        state = np.array([0.0, 0.0, 0.1, 0.0, 0.1, 0.0])

        _, tha1, tha2 = equations.compute_accelerations(state, 0.0)

        assert tha1 > 0.0
        assert tha2 > tha1

    def test_mirror_symmetry(self):
        equations = CartDoublePoleEquations()
        state = np.array([0.2, 0.5, -0.3, 1.1, 0.4, -2.0])

        forward = equations.compute_accelerations(state, 1.5)
        mirrored = equations.compute_accelerations(-state, -1.5)

        np.testing.assert_allclose(mirrored, [-a for a in forward], rtol=1e-13)

    def test_state_not_mutated(self):
        equations = CartDoublePoleEquations()
        state = np.array([0.2, 0.5, -0.3, 1.1, 0.4, -2.0])
        before = state.copy()

        equations.compute_accelerations(state, 1.0)

        np.testing.assert_array_equal(state, before)


class TestDoublePoleReference:
    """Test against independent evaluations"""

    def test_matches_symbolic_evaluation(self):
        params = CartDoublePoleParameters()
        equations = CartDoublePoleEquations(params)
        func = symbolic_accelerations(params)
        rng = np.random.default_rng(7)

        for _ in range(20):
            xv, th1, thv1, th2, thv2, force = rng.uniform(-2.0, 2.0, size=6)
            state = np.array([0.0, xv, th1, thv1, th2, thv2])

            result = equations.compute_accelerations(state, force)
            expected = [float(v) for v in func(xv, th1, thv1, th2, thv2, force)]

            np.testing.assert_allclose(result, expected, rtol=1e-9, atol=1e-10)

    def test_float32_agrees_with_float64(self):
        """Both precisions use the true 7/3 ratio"""
        eq32 = CartDoublePoleEquations(dtype="single")
        eq64 = CartDoublePoleEquations(dtype="double")
        rng = np.random.default_rng(3)

        for _ in range(10):
            state = rng.uniform(-1.0, 1.0, size=6)
            r32 = eq32.compute_accelerations(state.astype(np.float32), 0.5)
            r64 = eq64.compute_accelerations(state, 0.5)

            np.testing.assert_allclose(
                np.array(r32, dtype=np.float64), r64, rtol=1e-4, atol=1e-4
            )
