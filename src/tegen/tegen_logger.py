"""
Logger for tegen. Wraps the "tegen" stdlib logger and emits one JSON line per
message with the caller's location attached.
"""

import inspect
import logging
import sys
from datetime import datetime

from pydantic import BaseModel

LOGGER_NAME = "tegen"


class LogLine(BaseModel):
    """
    Represents a line in the tegen log
    """

    time: str
    level: str
    caller_file: str
    caller_name: str
    caller_line: int
    message: str


class TegenLogger:
    """
    Logger class
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(LOGGER_NAME)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the debug message with the caller's file, function and line
        """
        debug_message = debug_message.replace("\n", " ")

        curframe = inspect.currentframe()
        calframe = inspect.getouterframes(curframe, 2)

        caller_file = calframe[1][1].replace("\\", "/").split("/")[-1]
        caller_line = calframe[1][2]
        caller_name = calframe[1][3]

        debug_log_line = LogLine(
            time=str(datetime.now()),
            level=logging.getLevelName(level),
            caller_file=caller_file,
            caller_name=caller_name,
            caller_line=caller_line,
            message=debug_message,
        )

        self.logger.log(level=level, msg=debug_log_line.model_dump_json())


def configure_logging(verbose: bool = False) -> None:
    """
    Install a single stderr handler on the tegen logger.

    Args:
        verbose: Emit INFO and above when True, WARNING and above otherwise
    """
    level = logging.INFO if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
