"""Agent selection: pick one agent subproject under the context path."""

import sys
from pathlib import Path
from typing import Callable, List, Optional

AGENT_MARKER = "package.json"


class NoAgentError(RuntimeError):
    pass


class AmbiguousAgentError(RuntimeError):
    def __init__(self, root: str, candidates: List[str], reason: str = "run interactively to choose one"):
        self.root = root
        self.candidates = candidates
        super().__init__(f"Multiple agents found in {root}: {', '.join(candidates)} ({reason})")


def is_agent_dir(path: Path) -> bool:
    return (path / AGENT_MARKER).is_file()


def find_agents(root: str) -> List[str]:
    """Immediate subdirectories of *root* that hold an agent project, sorted by name."""
    base = Path(root)
    if not base.is_dir():
        return []
    return [str(p) for p in sorted(base.iterdir(), key=lambda p: p.name) if p.is_dir() and is_agent_dir(p)]


def _ask_choice(prompt: str, options: List[str], default: int = 0, attempts: int = 3) -> Optional[str]:
    """Ask user to pick from numbered options; None if no valid answer was given."""
    print(f"\n  {prompt}")
    for i, opt in enumerate(options):
        marker = " *" if i == default else ""
        print(f"    [{i + 1}] {opt}{marker}")
    for _ in range(attempts):
        raw = input(f"  Choice [default={default + 1}]: ").strip()
        if not raw:
            return options[default]
        try:
            idx = int(raw) - 1
        except ValueError:
            idx = -1
        if 0 <= idx < len(options):
            return options[idx]
        print(f"  Invalid choice: {raw} (enter 1-{len(options)})")
    return None


class DirectoryAgentChooser:
    def __init__(
        self,
        interactive: Optional[bool] = None,
        ask: Callable[[str, List[str]], Optional[str]] = _ask_choice,
    ):
        self._interactive = interactive
        self._ask = ask

    @property
    def interactive(self) -> bool:
        if self._interactive is None:
            return sys.stdin.isatty()
        return self._interactive

    def choose(self, root: str) -> str:
        if is_agent_dir(Path(root)):
            return root
        candidates = find_agents(root)
        if not candidates:
            raise NoAgentError(f"No agent found in {root} (expected a {AGENT_MARKER})")
        if len(candidates) == 1:
            return candidates[0]
        if not self.interactive:
            raise AmbiguousAgentError(root, [Path(c).name for c in candidates])
        names = [Path(c).name for c in candidates]
        picked = self._ask("Which agent?", names)
        if picked not in names:
            raise AmbiguousAgentError(root, names, reason="no valid choice given")
        return candidates[names.index(picked)]
