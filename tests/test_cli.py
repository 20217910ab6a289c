import json
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from chembalance.cli import app


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def invoke(self, *args, **kwargs):
        return self.runner.invoke(app, list(args), **kwargs)

    def test_balance_prints_steps(self):
        result = self.invoke("balance", "Zn + Cu^2+ -> Zn^2+ + Cu")
        self.assertEqual(result.exit_code, 0)
        lines = result.stdout.splitlines()
        self.assertEqual(lines[0], "Redox reaction detected. Using half-reaction method:")
        self.assertEqual(lines[-1], "Balanced Equation: Zn + Cu^2+ -> Zn^2+ + Cu")

    def test_balance_json(self):
        result = self.invoke("balance", "NaOH + HCl -> NaCl + H2O", "--json")
        self.assertEqual(result.exit_code, 0)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["method"], "algebraic")
        self.assertEqual(payload["coefficients"], [1, 1, 1, 1])

    def test_balance_error_still_exits_cleanly(self):
        result = self.invoke("balance", "H2 + O2")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Error: Equation must have a single", result.stdout)

    def test_validate_flag(self):
        result = self.invoke("balance", "2 NaOH + 1 HCl -> 1 NaCl + 1 H2O", "--validate-coefficients")
        self.assertIn("Supplied coefficients (2, 1, 1, 1) do not balance the equation", result.stdout)

    def test_oxidation(self):
        result = self.invoke("oxidation", "Cr2O7^2-")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(
            result.stdout.splitlines(),
            [
                "Species: Cr2O7^2-",
                "Charge: -2",
                "  Cr: x2, oxidation number +6",
                "  O: x7, oxidation number -2",
            ],
        )

    def test_oxidation_json(self):
        result = self.invoke("oxidation", "H2O2", "--json")
        payload = json.loads(result.stdout)
        self.assertEqual(payload["oxidation_numbers"], {"H": 1, "O": -1})
        self.assertEqual(payload["composition"], {"H": 2, "O": 2})

    def test_oxidation_parse_error(self):
        result = self.invoke("oxidation", "Ca(OH2")
        self.assertEqual(result.exit_code, 1)

    def test_mass(self):
        result = self.invoke("mass", "H2O, Fe2O3")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("  Total GFM: 18.015 g/mol", result.stdout)
        self.assertIn("Formula: Fe2O3\n  Fe: 111.690 g/mol (x2)", result.stdout)

    def test_mass_unknown_element(self):
        result = self.invoke("mass", "H2O, Xx")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: Unknown element: Xx", result.stdout)

    def test_mass_subscript_digits(self):
        result = self.invoke("mass", "H₂O")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unsupported digit character", result.stdout)

    def test_history_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            db = Path(tmp) / "history.db"
            self.assertEqual(self.invoke("balance", "H2 + O2 -> H2O", "--history", str(db)).exit_code, 0)
            self.invoke("balance", "NaOH + HCl -> NaCl + H2O", env={"CHEMBALANCE_HISTORY": str(db)})

            result = self.invoke("history", str(db), "--limit", "5")
            self.assertEqual(result.exit_code, 0)
            lines = result.stdout.splitlines()
            self.assertEqual(len(lines), 2)
            self.assertIn("algebraic\tNaOH + HCl -> NaCl + H2O\t=> NaOH + HCl -> NaCl + H2O", lines[0])
            self.assertTrue(lines[1].endswith("=> 2 H2 + O2 -> 2 H2O"))

    def test_history_sessions(self):
        with tempfile.TemporaryDirectory() as tmp:
            db = str(Path(tmp) / "history.db")
            self.invoke("balance", "Zn + Cu^2+ -> Zn^2+ + Cu", "--history", db, "--session", "lab")
            self.invoke("balance", "NaOH + HCl -> NaCl + H2O", "--history", db)

            lines = self.invoke("history", db, "--session", "lab").stdout.splitlines()
            self.assertEqual(len(lines), 1)
            self.assertIn("\tlab\tredox\t", lines[0])
            self.assertEqual(len(self.invoke("history", db).stdout.splitlines()), 2)


if __name__ == '__main__':
    unittest.main()
