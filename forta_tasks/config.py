import json
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .context import resolve_context_path


CONFIG_FILE_NAME = "forta-tasks.json"
DEFAULT_CLI_COMMAND = "npx forta-agent"
CLI_COMMAND_ENV = "FORTA_CLI_COMMAND"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ProjectConfig:
    root: str
    context_path: str
    cli_command: Tuple[str, ...]


def _cfg_get(cfg: Dict[str, Any], *path: str, default: Any = None) -> Any:
    cur: Any = cfg
    for p in path:
        if not isinstance(cur, dict) or p not in cur:
            return default
        cur = cur[p]
    return cur


def find_config_file(start: Path) -> Optional[Path]:
    """Walk up from *start* to the first directory holding forta-tasks.json."""
    cur = start.resolve()
    for d in (cur, *cur.parents):
        candidate = d / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path]) -> Dict[str, Any]:
    if path is None or not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def _optional_str(cfg: Dict[str, Any], *path: str, source: Optional[str] = None) -> Optional[str]:
    value = _cfg_get(cfg, *path)
    if value is not None and not isinstance(value, str):
        where = f" (in {source})" if source else ""
        raise ConfigError(f"{'.'.join(path)} must be a string{where}")
    return value


def build_project_config(root: str, cfg: Dict[str, Any], config_file: Optional[str] = None) -> ProjectConfig:
    """Build the process-wide config; the context path is resolved here and only here.

    `config_file` only names the source in error messages.
    """
    context_path = _optional_str(cfg, "forta", "contextPath", source=config_file)
    cli_command = (
        os.environ.get(CLI_COMMAND_ENV)
        or _optional_str(cfg, "forta", "cliCommand", source=config_file)
        or DEFAULT_CLI_COMMAND
    )
    argv = tuple(shlex.split(cli_command))
    if not argv:
        raise ConfigError("forta.cliCommand must not be empty")
    return ProjectConfig(
        root=root,
        context_path=resolve_context_path(root, context_path),
        cli_command=argv,
    )


def load_project(root: Optional[str] = None, config_path: Optional[str] = None) -> ProjectConfig:
    """Locate the host project and its user config, then build a ProjectConfig.

    - `config_path` given: read that file; its directory is the root unless `root` is also given.
    - `root` given: read forta-tasks.json inside it if present.
    - neither: search upward from the working directory; fall back to the working directory.
    """
    if config_path is not None:
        path: Optional[Path] = Path(config_path).resolve()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        root_dir = Path(root).resolve() if root else path.parent
    elif root is not None:
        root_dir = Path(root).resolve()
        path = root_dir / CONFIG_FILE_NAME
    else:
        path = find_config_file(Path.cwd())
        root_dir = path.parent if path is not None else Path.cwd().resolve()

    cfg = load_config(path)
    config_file = str(path) if path is not None and path.exists() else None
    return build_project_config(str(root_dir), cfg, config_file=config_file)
