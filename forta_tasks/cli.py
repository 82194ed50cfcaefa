import argparse
import json
import re
import sys
from typing import List, Optional

from . import __version__
from .agents import DirectoryAgentChooser
from .config import load_project
from .executor import FortaCliExecutor
from .tasks import TASKS, TaskDefinition, TaskEnv, run_task
from .templates import TemplateGenerator


def _kebab(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def _add_task_parser(sub: "argparse._SubParsersAction", task: TaskDefinition) -> None:
    sp = sub.add_parser(
        task.name,
        aliases=[task.qualified_name],
        help=task.description,
        description=task.description,
        allow_abbrev=False,
    )
    for a in task.args:
        opts = [f"--{a.name}"]
        if _kebab(a.name) != a.name:
            opts.append(f"--{_kebab(a.name)}")
        if a.flag:
            sp.add_argument(*opts, dest=a.name, action="store_true", default=None, help=a.help)
        else:
            help_text = f"{a.help} (default: {a.default})" if a.default is not None else a.help
            sp.add_argument(*opts, dest=a.name, default=None, metavar=a.name.upper(), help=help_text)
    sp.set_defaults(task=task)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="forta-tasks", description="Forta Agent project tasks")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--root", default=None, help="Host project root (default: nearest dir with forta-tasks.json, else cwd)")
    p.add_argument("--project-config", dest="config_path", default=None, help="Path to forta-tasks.json")
    sub = p.add_subparsers(dest="cmd", required=True)
    for task in TASKS.values():
        _add_task_parser(sub, task)
    return p


def cmd_task(args: argparse.Namespace) -> int:
    task: TaskDefinition = args.task
    config = load_project(root=args.root, config_path=args.config_path)
    env = TaskEnv(
        config=config,
        executor=FortaCliExecutor(config.cli_command),
        chooser=DirectoryAgentChooser(),
        generator=TemplateGenerator(),
    )
    supplied = {a.name: getattr(args, a.name) for a in task.args}
    run_task(task.name, supplied, env)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        rc = cmd_task(args)
    except KeyboardInterrupt:
        rc = 130
    except Exception as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        rc = 1
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
