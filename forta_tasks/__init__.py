__all__ = [
    "__version__",
    # Config
    "ProjectConfig",
    "load_project",
    "resolve_context_path",
    # Tasks
    "TASKS",
    "TaskArg",
    "TaskDefinition",
    "TaskEnv",
    "run_task",
    # Collaborators
    "DirectoryAgentChooser",
    "FortaCliExecutor",
    "TemplateGenerator",
]

__version__ = "0.1.0"

from .context import resolve_context_path  # noqa: E402, F401
from .config import ProjectConfig, load_project  # noqa: E402, F401
from .tasks import TASKS, TaskArg, TaskDefinition, TaskEnv, run_task  # noqa: E402, F401
from .agents import DirectoryAgentChooser  # noqa: E402, F401
from .executor import FortaCliExecutor  # noqa: E402, F401
from .templates import TemplateGenerator  # noqa: E402, F401
