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
Unit tests for the simulation driver.

Tests cover:
1. Step count from duration and tau in both precisions
2. Recording order (state before each advance) and time grid
3. Constant and scheduled forces
4. Divergence reporting
5. Configuration and run_simulation
"""

import warnings

import numpy as np
import pytest

from cartpolesim.numerical_integration import create_cartpole_integrator
from cartpolesim.physics import CartSinglePoleParameters
from cartpolesim.simulation import CartPoleSimulator, SimulationConfig, run_simulation


@pytest.fixture
def horizontal_release():
    return [0.0, 0.0, np.pi / 2, 0.0]


class TestStepCount:
    """Test the number of recorded steps"""

    @pytest.mark.parametrize("dtype", ["float32", "float64"])
    def test_demo_step_count(self, dtype):
        integrator = create_cartpole_integrator(tau=1.0 / 6.0, dtype=dtype)
        simulator = CartPoleSimulator(integrator, duration=15.0)

        assert simulator.timesteps == 90

    def test_step_count_truncates(self):
        integrator = create_cartpole_integrator(tau=0.3)
        assert CartPoleSimulator(integrator, duration=1.0).timesteps == 3

    @pytest.mark.parametrize("duration", [0.0, -1.0, np.nan, np.inf])
    def test_invalid_duration_raises(self, duration):
        with pytest.raises(ValueError, match="Duration must be positive"):
            CartPoleSimulator(create_cartpole_integrator(), duration=duration)

    def test_step_count_overflowing_precision_raises(self):
        # Subnormal but positive in float32; 15 / 1e-40 exceeds the float32 range
        integrator = create_cartpole_integrator(tau=1e-40, dtype="float32")

        with pytest.raises(ValueError, match="overflows float32"):
            CartPoleSimulator(integrator, duration=15.0)


class TestRecording:
    """Test recorded trajectory layout"""

    def test_first_row_is_initial_state(self, horizontal_release):
        integrator = create_cartpole_integrator(tau=0.1, state=horizontal_release)

        result = CartPoleSimulator(integrator, duration=1.0).run()

        np.testing.assert_array_equal(result["x"][0], horizontal_release)

    def test_rows_are_states_before_each_advance(self, horizontal_release):
        integrator = create_cartpole_integrator(tau=0.1, state=horizontal_release)
        result = CartPoleSimulator(integrator, duration=1.0).run(force=0.5)

        replay = create_cartpole_integrator(tau=0.1, state=horizontal_release)
        for k in range(result["nsteps"]):
            np.testing.assert_array_equal(result["x"][k], replay.state)
            replay.advance(0.5)

        # The integrator ends one step past the last recorded row
        np.testing.assert_array_equal(integrator.state, replay.state)

    def test_time_grid(self):
        integrator = create_cartpole_integrator(tau=1.0 / 6.0)

        result = CartPoleSimulator(integrator, duration=15.0).run()

        assert result["t"].shape == (90,)
        np.testing.assert_allclose(result["t"], np.arange(90) / 6.0, rtol=1e-15)
        assert result["t"][0] == 0.0

    def test_result_fields(self):
        integrator = create_cartpole_integrator("rk2", n_poles=2, tau=0.05, dtype="float32")

        result = CartPoleSimulator(integrator, duration=1.0).run()

        assert result["x"].shape == (20, 6)
        assert result["x"].dtype == np.float32
        assert result["success"] is True
        assert result["nsteps"] == 20
        assert result["nfev"] == 40
        assert result["solver"] == "Heun (RK2)"
        assert result["n_poles"] == 2
        assert result["integration_time"] >= 0.0
        assert "completed" in result["message"]


class TestForces:
    """Test constant and time-dependent forces"""

    def test_callable_force_evaluated_at_step_start(self):
        times = []

        def schedule(t):
            times.append(t)
            return 1.0 if t < 0.5 else -1.0

        integrator = create_cartpole_integrator(tau=0.1)
        result = CartPoleSimulator(integrator, duration=1.0).run(force=schedule)

        np.testing.assert_allclose(times, result["t"])

    def test_constant_force_moves_cart(self):
        integrator = create_cartpole_integrator(tau=0.01)

        result = CartPoleSimulator(integrator, duration=1.0).run(force=2.0)

        assert result["x"][-1, 0] > 0.0
        assert result["x"][-1, 1] > 0.0


class TestDivergence:
    """Test non-finite state reporting"""

    def test_nan_initial_state_warns_once(self):
        integrator = create_cartpole_integrator(tau=0.1, state=[np.nan, 0.0, 0.0, 0.0])

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = CartPoleSimulator(integrator, duration=1.0).run()

        messages = [str(w.message) for w in caught if issubclass(w.category, RuntimeWarning)]
        assert len([m for m in messages if "non-finite" in m]) == 1
        assert result["success"] is False
        assert result["message"] == "State diverged at step 0"
        assert result["nsteps"] == 10

    def test_degenerate_parameters_diverge_after_first_step(self):
        integrator = create_cartpole_integrator(
            tau=0.1, parameters=CartSinglePoleParameters(pole_mass=0.0, cart_mass=0.0)
        )

        with np.errstate(all="ignore"):
            with pytest.warns(RuntimeWarning, match="non-finite at step 1"):
                result = CartPoleSimulator(integrator, duration=1.0).run()

        assert result["success"] is False
        assert np.all(np.isfinite(result["x"][0]))
        assert np.isnan(result["x"][1]).any()

    def test_divergence_on_final_advance_reported(self):
        integrator = create_cartpole_integrator(
            tau=0.1, parameters=CartSinglePoleParameters(pole_mass=0.0, cart_mass=0.0)
        )
        simulator = CartPoleSimulator(integrator, duration=0.1)
        assert simulator.timesteps == 1

        with np.errstate(all="ignore"):
            with pytest.warns(RuntimeWarning, match="non-finite at step 1"):
                result = simulator.run()

        # Only the finite initial state is recorded
        assert np.all(np.isfinite(result["x"]))
        assert result["success"] is False
        assert result["message"] == "State diverged at step 1"


class TestRunSimulation:
    """Test configuration-driven runs"""

    def test_default_config(self):
        result = run_simulation()

        assert result["nsteps"] == 90
        assert result["solver"] == "RK4 (Classic)"
        np.testing.assert_array_equal(result["x"][0], [0.0, 0.0, np.pi / 2, 0.0])

    def test_double_pole_initial_state(self):
        config = SimulationConfig(n_poles=2, tau=0.01, duration=0.5)

        np.testing.assert_array_equal(
            config.build_initial_state(), [0.0, 0.0, np.pi / 2, 0.0, np.pi / 2, 0.0]
        )
        result = run_simulation(config)
        assert result["x"].shape == (50, 6)

    def test_explicit_initial_state(self):
        config = SimulationConfig(initial_state=[0.0, 0.0, 0.25, 0.0], duration=1.0)

        result = run_simulation(config)

        assert result["x"][0, 2] == 0.25

    def test_config_is_immutable(self):
        config = SimulationConfig()
        with pytest.raises(AttributeError):
            config.tau = 0.1

    def test_invalid_method_raises(self):
        with pytest.raises(ValueError, match="Unknown integration method"):
            run_simulation(SimulationConfig(method="rk45"))
