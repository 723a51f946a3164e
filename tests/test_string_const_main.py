#!/usr/bin/env python3
"""
Test the main function and command line interface of string_const.py.
"""

import io
import logging
import os
import subprocess
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# Add parent directory to path to import string_const module
sys.path.insert(0, str(Path(__file__).parent.parent))
import string_const  # pylint: disable=wrong-import-position

# Disable logging for tests
string_const.logger.setLevel(logging.CRITICAL)

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class TestMain(unittest.TestCase):
    def _run_main(self, argv, text=""):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with patch("sys.argv", ["string_const.py"] + argv):
            with patch("sys.stdin", io.StringIO(text)):
                with patch("sys.stdout", stdout), patch("sys.stderr", stderr):
                    try:
                        code = string_const.main()
                    except SystemExit as e:
                        code = e.code
        return code, stdout.getvalue(), stderr.getvalue()

    def test_constify(self) -> None:
        code, out, _ = self._run_main(["-c"], "ab\ncd\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, '"ab " +\n"cd";\n')

    def test_deconstify(self) -> None:
        code, out, _ = self._run_main(["-d"], '"ab " +\n"cd";\n')
        self.assertEqual(code, 0)
        self.assertEqual(out, 'ab\ncd";\n')

    def test_input_without_final_newline(self) -> None:
        code, out, _ = self._run_main(["-c"], "only")
        self.assertEqual(code, 0)
        self.assertEqual(out, '"only";\n')

    def test_empty_input(self) -> None:
        for flag in ("-c", "-d"):
            code, out, _ = self._run_main([flag], "")
            self.assertEqual(code, 0)
            self.assertEqual(out, "")

    def test_invalid_flag(self) -> None:
        code, out, err = self._run_main(["-x"], "ab\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn(string_const.USAGE_ERROR, err)
        self.assertIn("usage:", err)

    def test_missing_flag(self) -> None:
        code, out, err = self._run_main([], "ab\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn(string_const.USAGE_ERROR, err)

    def test_both_flags(self) -> None:
        code, out, _ = self._run_main(["-c", "-d"], "ab\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    def test_stray_argument(self) -> None:
        code, out, _ = self._run_main(["-c", "extra"], "ab\n")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    def test_invalid_flag_does_not_read_input(self) -> None:
        stdin = io.StringIO("ab\n")
        with patch("sys.argv", ["string_const.py", "-x"]):
            with patch("sys.stdin", stdin), patch("sys.stderr", io.StringIO()):
                with self.assertRaises(SystemExit):
                    string_const.main()
        self.assertEqual(stdin.tell(), 0)

    def test_version_argument(self) -> None:
        code, out, _ = self._run_main(["--version"])
        self.assertEqual(code, 0)
        self.assertIn("string_const", out)


class TestScriptExecution(unittest.TestCase):
    def _run_script(self, args, text=""):
        return subprocess.run(
            [sys.executable, "string_const.py"] + args,
            input=text,
            capture_output=True,
            text=True,
            timeout=30,
            check=False,
            cwd=REPO_ROOT,
        )

    def test_constify_pipeline(self) -> None:
        result = self._run_script(["-c"], "ab\ncd\n")
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.splitlines(), ['"ab " +', '"cd";'])

    def test_empty_input(self) -> None:
        result = self._run_script(["-d"], "")
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout, "")

    def test_invalid_flag_exit_status(self) -> None:
        result = self._run_script(["-x"], "ab\n")
        self.assertEqual(result.returncode, 1)
        self.assertEqual(result.stdout, "")
        self.assertIn(string_const.USAGE_ERROR, result.stderr)

    def test_no_argument_exit_status(self) -> None:
        result = self._run_script([], "ab\n")
        self.assertEqual(result.returncode, 1)
        self.assertEqual(result.stdout, "")


if __name__ == "__main__":
    unittest.main()
