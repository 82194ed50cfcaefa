import subprocess
import unittest
from unittest import mock

from forta_tasks.executor import CommandFailedError, FortaCliExecutor, build_argv


class TestBuildArgv(unittest.TestCase):
    def test_options(self) -> None:
        argv = build_argv(("npx", "forta-agent"), "run", {
            "contextPath": "/proj/agent",
            "tx": "0xabc",
            "block": None,
            "prod": True,
            "config": "forta.config.json",
            "nocache": False,
        })
        self.assertEqual(argv, [
            "npx", "forta-agent", "run",
            "--contextPath", "/proj/agent",
            "--tx", "0xabc",
            "--prod",
            "--config", "forta.config.json",
        ])


class TestFortaCliExecutor(unittest.TestCase):
    def test_runs_cli(self) -> None:
        with mock.patch("forta_tasks.executor.subprocess.run") as run:
            run.return_value = subprocess.CompletedProcess([], 0)
            FortaCliExecutor(["forta-agent"]).execute("keyfile", {"contextPath": "/p"})
        run.assert_called_once_with(["forta-agent", "keyfile", "--contextPath", "/p"])

    def test_default_command(self) -> None:
        self.assertEqual(FortaCliExecutor().cli_command, ("npx", "forta-agent"))

    def test_quoted_command_matches_config_parsing(self) -> None:
        with mock.patch("forta_tasks.executor.DEFAULT_CLI_COMMAND", "node \"/opt/forta agent/cli.js\""):
            self.assertEqual(FortaCliExecutor().cli_command, ("node", "/opt/forta agent/cli.js"))

    def test_non_zero_exit_raises(self) -> None:
        with mock.patch("forta_tasks.executor.subprocess.run") as run:
            run.return_value = subprocess.CompletedProcess([], 3)
            with self.assertRaises(CommandFailedError) as cm:
                FortaCliExecutor().execute("publish", {"contextPath": "/p"})
        self.assertEqual(cm.exception.returncode, 3)
        self.assertIn("publish", str(cm.exception))

    def test_missing_binary_raises(self) -> None:
        with mock.patch("forta_tasks.executor.subprocess.run", side_effect=FileNotFoundError("npx")):
            with self.assertRaises(CommandFailedError):
                FortaCliExecutor().execute("enable", {"contextPath": "/p"})


if __name__ == "__main__":
    unittest.main()
