"""marsdk configuration via environment variables.

The collector's own configuration arrives on stdin (see
``marsdk.protocol``). These settings only tune how the library itself
behaves inside the child process.
"""

import os
import logging

logger = logging.getLogger("marsdk.config")


class Settings:
    """Library settings sourced from MARSDK_* environment variables."""

    def __init__(self):
        self.version = "0.1.0"
        self.log_level = os.environ.get("MARSDK_LOG_LEVEL", "debug")

        # Stdin ingestion
        self.read_stdin = (
            os.environ.get("MARSDK_READ_STDIN", "true").lower() == "true"
        )

        # Fallback config files, <dir>/<name>.conf
        self.config_dir = os.environ.get("MARSDK_CONFIG_DIR", "")

    def resolve_config_dir(self, mar_dir: str) -> str:
        """Return the directory holding fallback ``.conf`` files."""
        if self.config_dir:
            return self.config_dir
        return os.path.join(mar_dir, "config")


settings = Settings()
