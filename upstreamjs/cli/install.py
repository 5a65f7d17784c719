"""Install command implementation."""

import logging

from upstreamjs.errors import UpstreamError
from upstreamjs.runtime.config_loader import load_install_config
from upstreamjs.runtime.process import UpstreamInstaller

logger = logging.getLogger("upstreamjs.cli.install")


def install_command(args) -> int:
    """Execute install command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code.
    """
    overrides = {
        "base_dir": getattr(args, "base_dir", None),
        "node_modules_dir": getattr(args, "node_modules_dir", None),
        "local_repository": getattr(args, "local_repository", None),
    }

    try:
        config = load_install_config(getattr(args, "config", None), overrides)
        logger.debug("Base dir: %s", config.base_dir)
        logger.debug("Output dir: %s", config.output_dir)
        logger.debug("Local repository: %s", config.local_repository)

        result = UpstreamInstaller(config).run(args.graph)
    except (UpstreamError, OSError) as e:
        logger.error("Install failed: %s", e)
        return 1

    if not result.skipped:
        logger.debug(
            "Installed %d module(s) for %s", result.stats.modules, result.project
        )
    return 0
