"""
Colored console output for startup messages printed before logging exists
"""

import os
import sys


class Colors:
    """ANSI color codes"""
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def supports_color(stream=sys.stdout):
    """Color only on a terminal, and never when NO_COLOR is set"""
    return stream.isatty() and 'NO_COLOR' not in os.environ


def colored_print(message: str, color: str, bold: bool = False, file=None):
    file = file or sys.stdout
    if supports_color(file):
        style = Colors.BOLD if bold else ""
        print(f"{style}{color}{message}{Colors.RESET}", file=file)
    else:
        print(message, file=file)


def print_step(message: str):
    colored_print(message, Colors.CYAN, bold=True)


def print_warning(message: str):
    colored_print(message, Colors.YELLOW)


def print_error(message: str):
    colored_print(message, Colors.RED, file=sys.stderr)


def print_success(message: str):
    colored_print(f"✅ {message}", Colors.GREEN, bold=True)


def print_failure(message: str):
    colored_print(f"❌ {message}", Colors.RED, bold=True, file=sys.stderr)
