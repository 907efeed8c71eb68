"""Generate command for creating default config."""

import logging
from pathlib import Path

import yaml

from ..models import TaskflowConfig
from ..services import ConfigService
from .output import error, info, success

logger = logging.getLogger(__name__)

CONFIG_HEADER = """\
# taskflow configuration
#
# api:
#   url: Base url of the task server (requests go to <url>/api/...)
#   timeout: Seconds to wait for a response
#   refresh_delay: Seconds between a local change and the follow-up refresh
#
# dashboard:
#   page_size: Tasks per page (1-100)
#   sort_by: createdAt, updatedAt, dueDate, priority or taskName
#   sort_order: asc or desc
#   priority / status: Initial filters ("all" shows everything)
#   priorities: Color and label per priority level
#     color: Named color (red, orange1, ...) or hex (#ff0000)

"""


def generate_config_yaml(api_url: str | None = None) -> str:
    """Generate YAML config from the default TaskflowConfig model.

    TaskflowConfig.default() is the single source of truth, so the
    generated file always matches the built-in defaults.

    Args:
        api_url: Server url to write instead of the default one
    """
    config = TaskflowConfig.default()
    config_dict = config.model_dump(mode="json")
    if api_url:
        config_dict["api"]["url"] = api_url.rstrip("/")

    yaml_content = yaml.dump(config_dict, default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + yaml_content


def run_generate(project_root: Path, api_url: str | None = None) -> int:
    """
    Write a default taskflow.yml into ``project_root``.

    Returns:
        Exit code (0 = created, 1 = nothing to do or failure)
    """
    config_path = project_root / ConfigService.CONFIG_FILE

    if config_path.exists():
        info(f"Config exists: {config_path}")
        print("Nothing to generate.")
        return 1

    try:
        project_root.mkdir(parents=True, exist_ok=True)
        config_path.write_text(generate_config_yaml(api_url))
    except OSError as e:
        logger.warning("Failed to write %s: %s", config_path, e)
        error(f"Could not write {config_path}: {e.strerror or e}")
        return 1

    success(f"Generated config: {config_path}")
    return 0
