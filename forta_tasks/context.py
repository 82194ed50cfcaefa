"""Context path resolution: where the agent project lives relative to the host root."""

import os
from typing import Optional


DEFAULT_AGENT_DIR = "agent"


def resolve_context_path(root: str, context_path: Optional[str] = None) -> str:
    """Return the absolute agent project root for a host project.

    No filesystem access happens here; the result need not exist.
    """
    if not context_path:
        return os.path.normpath(os.path.join(root, DEFAULT_AGENT_DIR))
    if os.path.isabs(context_path):
        return context_path
    return os.path.normpath(os.path.join(root, context_path))
