import sys
from typing import Optional

from loguru import logger


class LoggerManager:
    def __init__(self):
        self.console_sink_id = None
        self.file_sink_id = None

        # Always remove the default handler
        logger.remove()

    def enable_console(self, level: str = "INFO", serialize: bool = False):
        if self.console_sink_id is None:
            self.console_sink_id = logger.add(
                sys.stdout, level=level, colorize=not serialize, serialize=serialize
            )

    def disable_console(self):
        if self.console_sink_id is not None:
            logger.remove(self.console_sink_id)
            self.console_sink_id = None

    def enable_file(
        self,
        path: str,
        level: str = "INFO",
        rotation: str = "10 MB",
        retention: str = "7 days",
        serialize: bool = False,
    ):
        if self.file_sink_id is None:
            self.file_sink_id = logger.add(
                path, level=level, rotation=rotation, retention=retention, serialize=serialize
            )

    def disable_file(self):
        if self.file_sink_id is not None:
            logger.remove(self.file_sink_id)
            self.file_sink_id = None

    def configure(self, logging_config: Optional[object] = None):
        """Apply a LoggingConfig: console sink always, file sink when enabled."""
        if logging_config is None:
            self.enable_console()
            return

        self.disable_console()
        self.enable_console(level=logging_config.level, serialize=logging_config.enable_json)
        if logging_config.enable_file_logging and logging_config.log_file:
            self.disable_file()
            self.enable_file(
                logging_config.log_file,
                level=logging_config.level,
                rotation=logging_config.max_file_size,
                retention=f"{logging_config.retention_days} days",
                serialize=logging_config.enable_json,
            )


log_manager = LoggerManager()
