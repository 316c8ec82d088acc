"""
YOLOL VM - Configuration
========================

Runtime configuration for the virtual machine and its command-line tool.
Configuration can come from:
- Default values (defined here)
- Environment variables (VMConfig.from_env)
- Command-line options (the yololvm CLI overrides individual fields)
"""

from dataclasses import dataclass
import logging
import os


logger = logging.getLogger(__name__)

# The fixed grid every YOLOL chip exposes; goto targets are clamped to it.
DEFAULT_LINE_LIMIT = 20

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class VMConfig:
    """
    Configuration for a YololVM instance.

    Attributes:
        line_limit: Maximum number of program lines, also the upper bound
                    that goto targets are clamped to (default: 20)
        max_errors_per_line: Error records kept per line before further
                             records are dropped (default: 16)
        log_level: Logging level used by the CLI (default: "WARNING")
    """

    line_limit: int = DEFAULT_LINE_LIMIT
    max_errors_per_line: int = 16
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "VMConfig":
        """
        Create VMConfig from environment variables.

        Environment variables (all optional):
            YOLOL_VM_LINE_LIMIT: Line limit / goto clamp (integer)
            YOLOL_VM_MAX_ERRORS: Error records kept per line (integer)
            YOLOL_VM_LOG_LEVEL: Logging level name (e.g. "DEBUG")

        Returns:
            VMConfig with values from environment variables
        """
        config = cls()

        if line_limit := os.environ.get("YOLOL_VM_LINE_LIMIT"):
            try:
                config.line_limit = int(line_limit)
            except ValueError:
                logger.warning(f"Ignoring invalid YOLOL_VM_LINE_LIMIT={line_limit!r}")

        if max_errors := os.environ.get("YOLOL_VM_MAX_ERRORS"):
            try:
                config.max_errors_per_line = int(max_errors)
            except ValueError:
                logger.warning(f"Ignoring invalid YOLOL_VM_MAX_ERRORS={max_errors!r}")

        if log_level := os.environ.get("YOLOL_VM_LOG_LEVEL"):
            if log_level.upper() in LOG_LEVELS:
                config.log_level = log_level.upper()

        return config
