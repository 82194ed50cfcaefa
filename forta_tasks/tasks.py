"""Task catalog and dispatch.

Every task collects its declared arguments, fills in defaults and forwards
one normalized request to a collaborator:

    executor.execute(name, request)   # init, run, publish, push, disable, enable, keyfile
    generator.generate(context_path)  # generate

`init` and `keyfile` use the statically resolved context path, since the agent
directory may not exist yet. The rest ask the agent chooser first, which may
pick one of several subprojects under the context path.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, TextIO, Tuple

from .config import ProjectConfig

TASK_PREFIX = "forta-agent"
DEFAULT_CONFIG_FILE = "forta.config.json"


class TaskArgumentError(RuntimeError):
    pass


class UnknownTaskError(RuntimeError):
    pass


@dataclass(frozen=True)
class TaskArg:
    name: str
    help: str
    flag: bool = False
    default: Optional[str] = None


@dataclass
class TaskEnv:
    """What a running task can reach: the loaded config and its collaborators."""

    config: ProjectConfig
    executor: Any
    chooser: Any
    generator: Any
    stderr: TextIO = field(default_factory=lambda: sys.stderr)


@dataclass(frozen=True)
class TaskDefinition:
    name: str
    description: str
    action: Callable[[Dict[str, Any], TaskEnv], None]
    args: Tuple[TaskArg, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{TASK_PREFIX}:{self.name}"


def collect_args(task: TaskDefinition, supplied: Mapping[str, Any]) -> Dict[str, Any]:
    known = {a.name for a in task.args}
    unknown = sorted(k for k in supplied if k not in known)
    if unknown:
        raise TaskArgumentError(f"{task.name}: unknown argument(s): {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for a in task.args:
        value = supplied.get(a.name)
        if value is None:
            value = False if a.flag else a.default
        elif a.flag:
            value = bool(value)
        out[a.name] = value
    return out


# ── handlers ──

def _init(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("init", {"contextPath": env.config.context_path, **args})


def _run(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("run", {
        "contextPath": env.chooser.choose(env.config.context_path),
        "tx": args["tx"],
        "block": args["block"],
        "range": args["range"],
        "file": args["file"],
        "prod": args["prod"],
        "config": args["configFile"],
        "nocache": args["nocache"],
    })


def _publish(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("publish", {
        "contextPath": env.chooser.choose(env.config.context_path),
        "config": args["configFile"],
    })


def _push(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("push", {
        "contextPath": env.chooser.choose(env.config.context_path),
        "config": args["configFile"],
    })


def _disable(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("disable", {"contextPath": env.chooser.choose(env.config.context_path)})


def _enable(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("enable", {"contextPath": env.chooser.choose(env.config.context_path)})


def _keyfile(args: Dict[str, Any], env: TaskEnv) -> None:
    env.executor.execute("keyfile", {"contextPath": env.config.context_path})


def _generate(args: Dict[str, Any], env: TaskEnv) -> None:
    try:
        env.generator.generate(env.config.context_path)
    except Exception as e:
        print(f"Error while generating agent project: {e}", file=env.stderr)


_CONFIG_FILE_ARG = TaskArg("configFile", "Specify a config file", default=DEFAULT_CONFIG_FILE)

TASKS: Dict[str, TaskDefinition] = {t.name: t for t in (
    TaskDefinition("init", "Initialize a Forta Agent project", _init, (
        TaskArg("typescript", "Initialize as Typescript project", flag=True),
        TaskArg("python", "Initialize as Python project", flag=True),
    )),
    TaskDefinition("run", "Run the Forta Agent with latest blockchain data", _run, (
        TaskArg("tx", "Run with the specified transaction hash"),
        TaskArg("block", "Run with the specified block hash/number"),
        TaskArg("range", "Run with the specified block range (e.g. 15..20)"),
        TaskArg("file", "Run with the specified json file"),
        TaskArg("prod", "Run a server listening for events from a Forta Scanner", flag=True),
        _CONFIG_FILE_ARG,
        TaskArg("nocache", "Disables writing to the cache (but reads are still enabled)", flag=True),
    )),
    TaskDefinition("publish", "Publish the Forta Agent to the network", _publish, (_CONFIG_FILE_ARG,)),
    TaskDefinition("push", "Push the Forta Agent image to the repository", _push, (_CONFIG_FILE_ARG,)),
    TaskDefinition("disable", "Disables the Forta Agent", _disable),
    TaskDefinition("enable", "Enables the Forta Agent", _enable),
    TaskDefinition("keyfile", "Prints out keyfile information", _keyfile),
    TaskDefinition("generate", "Generate an agent project based on templates", _generate),
)}


def get_task(name: str) -> TaskDefinition:
    prefix = f"{TASK_PREFIX}:"
    key = name[len(prefix):] if name.startswith(prefix) else name
    try:
        return TASKS[key]
    except KeyError:
        raise UnknownTaskError(f"Unknown task: {name}") from None


def run_task(name: str, supplied: Mapping[str, Any], env: TaskEnv) -> None:
    task = get_task(name)
    task.action(collect_args(task, supplied), env)
