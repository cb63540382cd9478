"""
Scorecard Logger - Quiet background logging for workbook parses
Only warnings reach the console; a per-run log file (opt-in) keeps the rest.

DiagnosticLog is the ordered trace handed back with every parse. Its entries
are mirrored to the background logger as they are added.
"""

import logging
import os
from datetime import datetime
from typing import Iterator, List, Optional


LOGGER_NAME = 'scorecard'
CONSOLE_FORMAT = '[%(levelname)s] %(message)s'
FILE_FORMAT = '%(asctime)s %(levelname)-7s %(name)s | %(message)s'


class ScorecardLogger:
    """
    Process-wide logger for the scorecard pipeline.

    One instance per process: repeated construction returns the same object
    with its handlers already attached.
    """

    _instance = None
    _ready = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if ScorecardLogger._ready:
            return

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.log_file_path: Optional[str] = None
        self.file_handler: Optional[logging.FileHandler] = None

        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(logging.WARNING)
        self.console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        self.logger.addHandler(self.console_handler)

        ScorecardLogger._ready = True

    def set_console_level(self, level: str):
        """Change the console verbosity (e.g. 'INFO' for chatty runs)."""
        self.console_handler.setLevel(getattr(logging, level.upper(), logging.WARNING))

    def setup_for_workbook(self, output_folder: str, workbook_name: str):
        """
        Start a log file for one workbook run.

        The file goes to <output_folder>/Logs/scorecard_<stem>_<timestamp>.log
        and replaces the file handler of any previous run.
        """
        self._close_file_handler()

        logs_dir = os.path.join(output_folder, 'Logs')
        os.makedirs(logs_dir, exist_ok=True)

        stem = os.path.splitext(os.path.basename(workbook_name))[0]
        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        self.log_file_path = os.path.join(logs_dir, f"scorecard_{stem}_{stamp}.log")

        handler = logging.FileHandler(self.log_file_path, encoding='utf-8')
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        self.logger.addHandler(handler)
        self.file_handler = handler

        self.info(f"=== Parse of {workbook_name} ===")
        self.info(f"Writing log to {self.log_file_path}")

    def _close_file_handler(self):
        if self.file_handler is None:
            return
        self.logger.removeHandler(self.file_handler)
        self.file_handler.close()
        self.file_handler = None

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        """Also shown on the console."""
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args):
        """Also shown on the console."""
        self.logger.error(msg, *args)

    def extraction(self, field: str, value, source: str):
        """Record one cell read, flagging empty cells."""
        state = "EMPTY" if value is None or value == '' else "READ"
        self.debug(f"{state} [{source}] {field} = {value!r}")

    def step_start(self, step_name: str):
        self.info(f">>> {step_name}")

    def step_end(self, step_name: str, success: bool = True, details: str = None):
        outcome = "ok" if success else "FAILED"
        suffix = f" ({details})" if details else ""
        self.info(f"<<< {step_name}: {outcome}{suffix}")

    def get_log_path(self) -> Optional[str]:
        return self.log_file_path


class DiagnosticLog:
    """
    Ordered trace of what a parse found, rejected and why.

    Entries are plain strings so the presentation layer can show them as-is
    when troubleshooting a malformed workbook.
    """

    def __init__(self):
        self._entries: List[str] = []
        self._logger = get_logger()

    def add(self, msg: str):
        self._entries.append(msg)
        self._logger.debug(msg)

    def warn(self, msg: str):
        self._entries.append(f"WARNING: {msg}")
        self._logger.warning(msg)

    def extend(self, entries: List[str]):
        for msg in entries:
            self.add(msg)

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


_logger: Optional[ScorecardLogger] = None


def get_logger() -> ScorecardLogger:
    """Shared ScorecardLogger, created on first use."""
    global _logger
    if _logger is None:
        _logger = ScorecardLogger()
    return _logger


def setup_logging(output_folder: str, workbook_name: str) -> ScorecardLogger:
    """Attach a per-workbook log file and return the shared logger."""
    logger = get_logger()
    logger.setup_for_workbook(output_folder, workbook_name)
    return logger
