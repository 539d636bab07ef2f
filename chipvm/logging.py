"""Console logging utilities for the CHIP-8 machine.

Provides a small leveled logger printing to stdout, and a tqdm progress bar
builder used when running long instruction batches.
"""

import time
import sys
from typing import Callable, Optional, Tuple

from tqdm import tqdm


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Console logger with levels, colours and elapsed-time stamps.

    Messages are printed to stdout as ``[   0.12s][    INFO][chipvm] message``.
    Colours are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(LEVELS)}"
            )
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{COLORS[level]}{level_str}{RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Print ``message`` if ``level`` is at or above the logger's threshold."""
        level = level.upper()
        if self.is_enabled_for(level):
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


def build_tqdm_progress_bar(
    n: int,
    print_rate: Optional[int] = None,
    desc: str = None,
    **kwargs,
) -> Tuple[Callable[[int], None], Callable[[int], None]]:
    """Build a tqdm progress bar updated every ``print_rate`` steps.

    Returns an ``update(iter_num)`` callback to call once per step and a
    ``close(iter_count)`` callback that flushes the steps not yet reported.
    """
    if desc is None:
        desc = f"Running ({n:,} instructions)"

    for kwarg in ("total", "mininterval", "maxinterval", "miniters"):
        kwargs.pop(kwarg, None)

    if print_rate is None:
        print_rate = max(1, min(n // 20, 50))
    else:
        print_rate = max(1, min(print_rate, n))

    bar = tqdm(total=n, desc=desc, unit="instr", **kwargs)
    reported = [0]

    def _update_progress_bar(iter_num):
        done = iter_num + 1
        if done % print_rate == 0:
            bar.update(done - reported[0])
            reported[0] = done

    def _close_progress_bar(iter_count):
        bar.update(iter_count - reported[0])
        bar.close()

    return _update_progress_bar, _close_progress_bar
