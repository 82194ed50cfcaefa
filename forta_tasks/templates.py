"""Starter agent project templates."""

import json
import os
import re
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional


AGENT_JS = """\
const { Finding, FindingSeverity, FindingType } = require("forta-agent");

const ERC20_TRANSFER_EVENT =
  "event Transfer(address indexed from, address indexed to, uint256 value)";

const handleTransaction = async (txEvent) => {
  const findings = [];

  const transferEvents = txEvent.filterLog(ERC20_TRANSFER_EVENT);
  transferEvents.forEach((transferEvent) => {
    findings.push(
      Finding.fromObject({
        name: "Token Transfer",
        description: `Transfer of ${transferEvent.args.value}`,
        alertId: "FORTA-1",
        severity: FindingSeverity.Info,
        type: FindingType.Info,
      })
    );
  });

  return findings;
};

module.exports = {
  handleTransaction,
};
"""

GITIGNORE = """\
node_modules/
forta.config.json
"""


def _ask(prompt: str, default: str = "") -> str:
    """Ask a question with optional default."""
    if default:
        raw = input(f"  {prompt} [{default}]: ").strip()
        return raw if raw else default
    return input(f"  {prompt}: ").strip()


def package_name(raw: str) -> str:
    """npm-safe package name: lowercase, runs of other characters collapsed to '-'."""
    name = re.sub(r"[^a-z0-9._-]+", "-", raw.strip().lower()).strip("-.")
    return name or "forta-agent-project"


def render_files(name: str) -> Dict[str, str]:
    package = {
        "name": name,
        "version": "0.0.1",
        "description": "Forta Agent",
        "scripts": {
            "start": "npm run start:dev",
            "start:dev": "forta-agent run",
            "tx": "forta-agent run --tx",
            "block": "forta-agent run --block",
            "range": "forta-agent run --range",
            "file": "forta-agent run --file",
            "publish": "forta-agent publish",
            "push": "forta-agent push",
            "disable": "forta-agent disable",
            "enable": "forta-agent enable",
            "keyfile": "forta-agent keyfile",
        },
        "dependencies": {"forta-agent": "^0.1.0"},
    }
    return {
        "package.json": json.dumps(package, indent=2) + "\n",
        "forta.config.json": json.dumps({"agentId": name}, indent=2) + "\n",
        "src/agent.js": AGENT_JS,
        ".gitignore": GITIGNORE,
    }


class TemplateGenerator:
    def __init__(self, interactive: Optional[bool] = None, ask: Callable[[str, str], str] = _ask):
        self._interactive = interactive
        self._ask = ask

    @property
    def interactive(self) -> bool:
        if self._interactive is None:
            return sys.stdin.isatty()
        return self._interactive

    def generate(self, root: str) -> None:
        target = Path(root)
        if target.exists() and not target.is_dir():
            raise FileExistsError(f"{target} exists and is not a directory")
        if target.is_dir() and any(target.iterdir()):
            raise FileExistsError(f"{target} is not empty")

        name = package_name(target.name)
        if self.interactive:
            name = package_name(self._ask("Agent name", name))

        # Stage beside the target so a failed write leaves nothing behind.
        target.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=target.parent))
        try:
            for rel, content in render_files(name).items():
                path = staging / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")
            if target.is_dir():
                target.rmdir()
            os.chmod(staging, 0o755)
            os.replace(staging, target)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        print(str(target))
