import contextlib
import io
import tempfile
import unittest
from pathlib import Path

from quotient.cli import evaluate, load_settings, main


def run_cli(*argv):
    stdout = io.StringIO()
    stderr = io.StringIO()
    with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
        code = main(list(argv))
    return code, stdout.getvalue(), stderr.getvalue()


class EvaluateTests(unittest.TestCase):
    def test_operations(self):
        self.assertEqual(evaluate("add", [1, 2, 1, 3]).display(), "5/6")
        self.assertEqual(evaluate("sub", [1, 2, 1, 3]).display(), "1/6")
        self.assertEqual(evaluate("mul", [2, 3, 3, 4]).display(), "1/2")
        self.assertEqual(evaluate("div", [1, 2, -1, 3]).display(), "-3/2")
        self.assertEqual(evaluate("show", [8, 12]).display(), "2/3")

    def test_operand_count(self):
        with self.assertRaises(ValueError):
            evaluate("add", [1, 2])
        with self.assertRaises(ValueError):
            evaluate("show", [1, 2, 3, 4])


class MainTests(unittest.TestCase):
    def test_prints_display_form(self):
        code, out, err = run_cli("add", "1", "2", "1", "3")
        self.assertEqual(code, 0)
        self.assertEqual(out, "5/6\n")
        self.assertEqual(err, "")

    def test_negative_operands(self):
        code, out, _ = run_cli("div", "1", "2", "-1", "3")
        self.assertEqual(code, 0)
        self.assertEqual(out, "-3/2\n")

    def test_value_flag(self):
        code, out, _ = run_cli("--value", "show", "8", "12")
        self.assertEqual(code, 0)
        self.assertEqual(out, "2/3\n0.6666666666666666\n")

    def test_whole_number(self):
        _, out, _ = run_cli("show", "12", "4")
        self.assertEqual(out, "3\n")

    def test_division_by_zero_reported(self):
        code, out, err = run_cli("div", "1", "2", "0", "1")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertEqual(err, "Error: division by zero\n")

    def test_invalid_denominator_reported(self):
        code, _, err = run_cli("show", "1", "0")
        self.assertEqual(code, 1)
        self.assertIn("denominator must be >= 1", err)

    def test_wrong_operand_count_reported(self):
        code, _, err = run_cli("add", "1", "2")
        self.assertEqual(code, 1)
        self.assertTrue(err.startswith("Error: "))

    def test_overflow_reported(self):
        code, _, err = run_cli("--int-bits", "8", "mul", "16", "1", "16", "1")
        self.assertEqual(code, 1)
        self.assertIn("8-bit", err)

    def test_value_too_large_for_float_reported(self):
        code, out, err = run_cli("--value", "show", "1" + "0" * 400, "1")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertTrue(err.startswith("Error: "))

    def test_unknown_operation_exits(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["pow", "1", "2"])
        self.assertEqual(ctx.exception.code, 2)


class ConfigTests(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.config = Path(self._tmpdir.name) / "quotient.toml"
        self.config.write_text("int_bits = 8\n")

    def test_load_settings(self):
        self.assertEqual(load_settings(str(self.config)).int_bits, 8)
        self.assertIsNone(load_settings(None).int_bits)

    def test_load_settings_rejects_bad_width(self):
        self.config.write_text('int_bits = "wide"\n')
        with self.assertRaises(ValueError):
            load_settings(str(self.config))

    def test_config_width_applies(self):
        code, _, err = run_cli("--config", str(self.config), "mul", "16", "1", "16", "1")
        self.assertEqual(code, 1)
        self.assertIn("8-bit", err)

    def test_command_line_overrides_config(self):
        code, out, _ = run_cli(
            "--config", str(self.config), "--int-bits", "32", "mul", "16", "1", "16", "1"
        )
        self.assertEqual(code, 0)
        self.assertEqual(out, "256\n")

    def test_missing_config_reported(self):
        missing = Path(self._tmpdir.name) / "absent.toml"
        code, _, err = run_cli("--config", str(missing), "show", "1", "2")
        self.assertEqual(code, 1)
        self.assertIn("Config file not found", err)


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
