import logging
import sys


class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"
    BLUE = "\033[34m"
    BOLD = "\033[1m"


def style(text: str, *codes: str) -> str:
    """Wrap text in ANSI codes. Plain text when stdout is not a TTY."""
    if not codes or not sys.stdout.isatty():
        return text
    return "".join(codes) + text + Colors.RESET


class ColorFormatter(logging.Formatter):
    COLOR_MAP = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.RED + Colors.BOLD,
    }

    def format(self, record):
        color = self.COLOR_MAP.get(record.levelno, Colors.RESET)
        message = super().format(record)
        return f"{color}{message}{Colors.RESET}"


def setup_logger(name="cdnadd", level=None):
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    # Prevent adding multiple handlers in case of repeated calls
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(ColorFormatter("%(message)s"))
        logger.addHandler(ch)
    return logger
