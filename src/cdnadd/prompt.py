from typing import Callable

from .logger import Colors, style

Ask = Callable[[str], str]


def ask(prompt_text: str) -> str:
    """Read one line from the console. An empty line is a valid answer."""
    return input(style(prompt_text, Colors.BOLD))
