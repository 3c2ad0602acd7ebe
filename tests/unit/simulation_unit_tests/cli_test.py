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
Unit tests for the command-line simulator.
"""

import csv

import pytest

from cartpolesim.cli import build_parser, default_output_name, main


def read_rows(path):
    with open(path, newline="") as fh:
        return list(csv.reader(fh))


class TestOutputName:
    @pytest.mark.parametrize(
        "method, tau, precision, expected",
        [
            ("rk4", 1.0 / 6.0, "double", "theta-RK4-tau0_1667-doubleprecision.csv"),
            ("euler", 0.01, "single", "theta-EULER-tau0_01-singleprecision.csv"),
            ("rk2", 1.0, "double", "theta-RK2-tau1-doubleprecision.csv"),
        ],
    )
    def test_default_output_name(self, method, tau, precision, expected):
        assert default_output_name(method, tau, precision) == expected


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.poles == 1
        assert args.method == "rk4"
        assert args.tau == pytest.approx(1.0 / 6.0)
        assert args.duration == 15.0
        assert args.precision == "double"
        assert args.output is None

    def test_method_is_case_insensitive(self):
        assert build_parser().parse_args(["--method", "RK2"]).method == "rk2"

    @pytest.mark.parametrize("argv", [["--method", "rk45"], ["--poles", "3"], ["--precision", "half"]])
    def test_invalid_choices_exit(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(argv)
        assert excinfo.value.code == 2


class TestMain:
    def test_single_pole_run(self, tmp_path, capsys):
        output = tmp_path / "theta.csv"

        assert main(["--duration", "1", "--output", str(output)]) == 0

        rows = read_rows(output)
        assert rows[0] == ["time", "theta"]
        assert len(rows) == 7
        out = capsys.readouterr().out
        assert "Cart and Pole Model Simulator" in out
        assert "RK4 (Classic): 6 steps, 24 evaluations" in out

    def test_double_pole_single_precision(self, tmp_path):
        output = tmp_path / "double.csv"

        main(
            [
                "--poles", "2",
                "--method", "euler",
                "--tau", "0.01",
                "--duration", "0.5",
                "--precision", "single",
                "--output", str(output),
            ]
        )

        rows = read_rows(output)
        assert rows[0] == ["time", "x", "theta1", "theta2"]
        assert len(rows) == 51

    def test_default_output_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        main(["--duration", "1"])

        assert (tmp_path / "theta-RK4-tau0_1667-doubleprecision.csv").exists()

    def test_invalid_tau_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--tau", "0", "--output", str(tmp_path / "x.csv")])

        assert excinfo.value.code == 2
        assert "positive and finite" in capsys.readouterr().err

    @pytest.mark.parametrize("tau", ["1e-46", "1e39"])
    def test_tau_unrepresentable_in_single_precision_exits(self, tmp_path, capsys, tau):
        with pytest.raises(SystemExit) as excinfo:
            main(["--tau", tau, "--precision", "single", "--output", str(tmp_path / "x.csv")])

        assert excinfo.value.code == 2
        assert "not representable" in capsys.readouterr().err
        assert not (tmp_path / "x.csv").exists()

    def test_divergence_reported(self, tmp_path, capsys):
        with pytest.warns(RuntimeWarning, match="non-finite"):
            main(["--initial-angle", "nan", "--duration", "1", "--output", str(tmp_path / "x.csv")])

        assert "Warning: State diverged at step 0" in capsys.readouterr().out
