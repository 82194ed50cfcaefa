import io
import unittest
from typing import Tuple
from unittest import mock

from forta_tasks.config import ProjectConfig
from forta_tasks.tasks import (
    TASKS,
    TaskArgumentError,
    TaskEnv,
    UnknownTaskError,
    collect_args,
    get_task,
    run_task,
)

CHOOSER_TASKS = ("run", "publish", "push", "disable", "enable")


def _env() -> Tuple[TaskEnv, mock.Mock]:
    cfg = ProjectConfig(root="/proj", context_path="/proj/agent", cli_command=("forta-agent",))
    manager = mock.Mock()
    manager.chooser.choose.return_value = "/proj/agent/picked"
    return TaskEnv(
        config=cfg,
        executor=manager.executor,
        chooser=manager.chooser,
        generator=manager.generator,
        stderr=io.StringIO(),
    ), manager


class TestCatalog(unittest.TestCase):
    def test_task_names(self) -> None:
        self.assertEqual(
            sorted(TASKS),
            ["disable", "enable", "generate", "init", "keyfile", "publish", "push", "run"],
        )

    def test_qualified_name_lookup(self) -> None:
        self.assertIs(get_task("forta-agent:run"), TASKS["run"])
        self.assertEqual(TASKS["init"].qualified_name, "forta-agent:init")
        with self.assertRaises(UnknownTaskError):
            get_task("deploy")

    def test_collect_args_defaults(self) -> None:
        args = collect_args(TASKS["run"], {})
        self.assertEqual(args, {
            "tx": None,
            "block": None,
            "range": None,
            "file": None,
            "prod": False,
            "configFile": "forta.config.json",
            "nocache": False,
        })

    def test_collect_args_rejects_unknown(self) -> None:
        with self.assertRaises(TaskArgumentError):
            collect_args(TASKS["publish"], {"config": "x.json"})


class TestDispatch(unittest.TestCase):
    def test_init_uses_resolved_context(self) -> None:
        env, m = _env()
        run_task("init", {"typescript": True}, env)
        m.chooser.choose.assert_not_called()
        m.executor.execute.assert_called_once_with(
            "init", {"contextPath": "/proj/agent", "typescript": True, "python": False},
        )

    def test_keyfile_uses_resolved_context(self) -> None:
        env, m = _env()
        run_task("keyfile", {}, env)
        m.chooser.choose.assert_not_called()
        m.executor.execute.assert_called_once_with("keyfile", {"contextPath": "/proj/agent"})

    def test_run_forwards_all_fields(self) -> None:
        env, m = _env()
        run_task("run", {
            "tx": "0xabc",
            "block": "15000000",
            "range": "15..20",
            "file": "events.json",
            "prod": True,
            "configFile": "custom.json",
            "nocache": True,
        }, env)
        m.executor.execute.assert_called_once_with("run", {
            "contextPath": "/proj/agent/picked",
            "tx": "0xabc",
            "block": "15000000",
            "range": "15..20",
            "file": "events.json",
            "prod": True,
            "config": "custom.json",
            "nocache": True,
        })

    def test_run_defaults(self) -> None:
        env, m = _env()
        run_task("run", {}, env)
        m.executor.execute.assert_called_once_with("run", {
            "contextPath": "/proj/agent/picked",
            "tx": None,
            "block": None,
            "range": None,
            "file": None,
            "prod": False,
            "config": "forta.config.json",
            "nocache": False,
        })

    def test_config_file_renamed(self) -> None:
        for name in ("run", "publish", "push"):
            env, m = _env()
            run_task(name, {"configFile": "other.json"}, env)
            request = m.executor.execute.call_args[0][1]
            self.assertEqual(request["config"], "other.json")
            self.assertNotIn("configFile", request)

    def test_publish_and_push_default_config(self) -> None:
        for name in ("publish", "push"):
            env, m = _env()
            run_task(name, {}, env)
            m.executor.execute.assert_called_once_with(
                name, {"contextPath": "/proj/agent/picked", "config": "forta.config.json"},
            )

    def test_chooser_called_once_before_executor(self) -> None:
        for name in CHOOSER_TASKS:
            env, m = _env()
            run_task(name, {}, env)
            self.assertEqual(
                [c[0] for c in m.mock_calls],
                ["chooser.choose", "executor.execute"],
            )
            m.chooser.choose.assert_called_once_with("/proj/agent")
            self.assertEqual(m.executor.execute.call_args[0][1]["contextPath"], "/proj/agent/picked")

    def test_disable_enable_forward_only_context(self) -> None:
        for name in ("disable", "enable"):
            env, m = _env()
            run_task(name, {}, env)
            m.executor.execute.assert_called_once_with(name, {"contextPath": "/proj/agent/picked"})

    def test_executor_errors_propagate(self) -> None:
        env, m = _env()
        m.executor.execute.side_effect = RuntimeError("boom")
        with self.assertRaises(RuntimeError):
            run_task("keyfile", {}, env)

    def test_chooser_errors_propagate_without_execute(self) -> None:
        env, m = _env()
        m.chooser.choose.side_effect = LookupError("no agents")
        with self.assertRaises(LookupError):
            run_task("enable", {}, env)
        m.executor.execute.assert_not_called()

    def test_generate_calls_generator_only(self) -> None:
        env, m = _env()
        run_task("forta-agent:generate", {}, env)
        m.generator.generate.assert_called_once_with("/proj/agent")
        m.executor.execute.assert_not_called()
        m.chooser.choose.assert_not_called()

    def test_generate_failure_is_reported_not_raised(self) -> None:
        env, m = _env()
        m.generator.generate.side_effect = OSError("disk full")
        run_task("generate", {}, env)
        msg = env.stderr.getvalue()
        self.assertIn("Error while generating agent project", msg)
        self.assertIn("disk full", msg)


if __name__ == "__main__":
    unittest.main()
