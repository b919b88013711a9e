#!/usr/bin/env python3

class Colors:
    """ANSI color codes for plain terminal reports"""
    # By default use colored output
    MINIMAL = False

    RED = '\033[91m'      # Error messages
    YELLOW = '\033[93m'   # Warning messages
    RESET = '\033[0m'     # Reset to default


def colorize(text: str, color: str) -> str:
    """Colorize text with given color, unless output is minimal"""
    if getattr(Colors, 'MINIMAL', False):
        return text
    return f"{color}{text}{Colors.RESET}"
