import logging
import os
from enum import Enum
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from utils.file_manager import FileManager


class LogLevel(Enum):
    """
    Enum for log levels to improve readability and usability.

    Attributes:
        DEBUG: Debug log level.
        INFO: Info log level.
        WARNING: Warning log level.
        ERROR: Error log level.
        CRITICAL: Critical log level.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogOutput(Enum):
    """Destinations a logger writes to."""

    CONSOLE = "console"
    FILE = "file"
    BOTH = "both"

    @classmethod
    def parse(cls, value: "str | LogOutput") -> "LogOutput":
        if isinstance(value, LogOutput):
            return value
        try:
            return cls(value.lower())
        except ValueError as e:
            raise ValueError(
                f"Invalid log output: {value}. Must be one of 'console', 'file', or 'both'."
            ) from e


class LevelFilter(logging.Filter):
    """
    A logging filter that only lets through records of exactly one level.
    """

    def __init__(self, level: LogLevel):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == self.level.value


class ColorFormatter(logging.Formatter):
    """
    A logging formatter that colours the level tag by severity and the logger
    name by a per-logger colour.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[94m",  # Blue
        logging.INFO: "\033[92m",  # Green
        logging.WARNING: "\033[93m",  # Yellow
        logging.ERROR: "\033[91m",  # Red
        logging.CRITICAL: "\033[91m\033[1m",  # Bold Red
    }
    RESET = "\033[0m"

    MODULE_COLORS = [
        "\033[95m",
        "\033[96m",
        "\033[93m",
        "\033[92m",
        "\033[94m",
        "\033[90m",
        "\033[36m",
        "\033[35m",
        "\033[34m",
        "\033[33m",
    ]

    def __init__(self, logger_number: int):
        """
        Args:
            logger_number (int): Unique identifier for assigning a colour.
        """
        super().__init__()
        self.color = self.MODULE_COLORS[logger_number % len(self.MODULE_COLORS)]

    def format(self, record: logging.LogRecord) -> str:
        log_fmt = (
            "[%(asctime)s]"
            + self.LEVEL_COLORS.get(record.levelno, self.RESET)
            + "[%(levelname)s]"
            + self.RESET
            + self.color
            + "[%(name)s]"
            + self.RESET
            + ": %(message)s"
        )
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


class LogManager:
    """
    Singleton LogManager to manage loggers for the CLI.
    """

    _instance = None

    FILE_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s]: %(message)s"

    @staticmethod
    def initialize(
        log_dir: str,
        log_file: str,
        log_retention_hours: int,
        default_level: LogLevel = LogLevel.INFO,
        use_filter: bool = False,
        log_output: str = "both",
    ):
        """
        Initializes the singleton instance of LogManager.

        Args:
            log_dir (str): Directory where log files are saved.
            log_file (str): Name of the log file.
            log_retention_hours (int): Number of rotated hourly files to keep.
            default_level (LogLevel): Default logging level. Defaults to LogLevel.INFO.
            use_filter (bool): Whether to use level-based filtering. Defaults to False.
            log_output (str): 'console', 'file' or 'both'. Defaults to 'both'.
        """
        if LogManager._instance is None:
            LogManager._instance = LogManager(
                log_dir, log_file, log_retention_hours, default_level, use_filter, log_output
            )

    @staticmethod
    def get_instance() -> "LogManager":
        """
        Returns the singleton instance of LogManager.
        """
        if LogManager._instance is None:
            raise RuntimeError("LogManager is not initialized. Call `LogManager.initialize()` first.")
        return LogManager._instance

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(LogManager, cls).__new__(cls)
        return cls._instance

    def __init__(
        self,
        log_dir: str,
        log_file: str,
        log_retention_hours: int,
        default_level: LogLevel = LogLevel.INFO,
        use_filter: bool = False,
        log_output: str = "both",
    ):
        """
        Raises:
            TypeError: If the arguments have invalid types.
            ValueError: If log_output is not a known destination.
        """
        if hasattr(self, "_initialized") and self._initialized:
            return

        if not isinstance(log_dir, str):
            raise TypeError("log_dir must be a string")
        if not isinstance(log_file, str):
            raise TypeError("log_file must be a string")
        if not isinstance(log_retention_hours, int):
            raise TypeError("log_retention_hours must be an integer")

        self.main_name = "__main__"
        self.log_dir = log_dir
        self.log_file = log_file
        self.log_retention_hours = log_retention_hours
        self.default_level = default_level
        self.use_filter = use_filter
        self.log_output = LogOutput.parse(log_output)
        self.loggers: dict[str, Logger] = {}

        if self.log_output != LogOutput.CONSOLE:
            FileManager.create_folder(self.log_dir)
        self._initialize_logger(self.main_name)
        self._initialized = True

    def _initialize_logger(self, name: str, module_index: int = 0):
        """
        Configures a logger with the handlers selected by ``log_output``.

        Args:
            name (str): The name of the logger.
            module_index (int): Index for assigning module colours.
        """
        logger = logging.getLogger(name)
        logger.propagate = False
        logger.setLevel(self.default_level.value)

        if logger.hasHandlers():
            self.loggers[name] = logger
            return

        handlers: list[logging.Handler] = []

        if self.log_output in (LogOutput.CONSOLE, LogOutput.BOTH):
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(ColorFormatter(logger_number=module_index))
            handlers.append(console_handler)

        if self.log_output in (LogOutput.FILE, LogOutput.BOTH):
            log_file_path = os.path.join(self.log_dir, self.log_file)
            file_handler = TimedRotatingFileHandler(
                log_file_path,
                when="h",
                interval=1,
                backupCount=self.log_retention_hours,
                encoding="utf-8",
            )
            file_handler.setFormatter(logging.Formatter(self.FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            handlers.append(file_handler)

        for handler in handlers:
            if self.use_filter:
                handler.addFilter(LevelFilter(self.default_level))
            logger.addHandler(handler)

        self.loggers[name] = logger

    def get_logger(
        self,
        name: Optional[str] = None,
        module_name: Optional[str] = None,
    ) -> Logger:
        """
        Retrieves or creates a logger instance.

        Args:
            name (Optional[str]): The base name of the logger. Defaults to the main logger.
            module_name (Optional[str]): Appended to the name as ``name.module_name``.

        Returns:
            Logger: The configured logger instance.
        """
        logger_name = name if isinstance(name, str) and name.strip() else self.main_name

        if module_name:
            logger_name = f"{logger_name}.{module_name}"

        if logger_name not in self.loggers:
            self._initialize_logger(logger_name, len(self.loggers))

        return self.loggers[logger_name]

    def set_level(self, level: LogLevel) -> None:
        """Changes the level of every managed logger, e.g. for a ``--verbose`` flag."""
        self.default_level = level
        for logger in self.loggers.values():
            logger.setLevel(level.value)
