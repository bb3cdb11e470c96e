import logging
from contextlib import contextmanager
from typing import Iterator, Optional


class CountingHandler(logging.Handler):
    """Tallies WARNING and ERROR records seen while attached."""

    def __init__(self, level: int = logging.WARNING):
        super().__init__(level)
        self.warnings = 0
        self.errors = 0

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.ERROR:
            self.errors += 1
        else:
            self.warnings += 1

    def summary(self) -> str:
        return f"{self.warnings} warning(s), {self.errors} error(s)"


@contextmanager
def counting_warnings(logger: Optional[logging.Logger] = None) -> Iterator[CountingHandler]:
    """Attach a CountingHandler to `logger` (root by default) for the block."""
    target = logger or logging.getLogger()
    handler = CountingHandler()
    target.addHandler(handler)
    try:
        yield handler
    finally:
        target.removeHandler(handler)
