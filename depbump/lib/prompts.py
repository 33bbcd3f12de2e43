"""
Interactive prompts.

Plain input()-based prompts. EOF (Ctrl+D) is treated as "no answer" and
returns the default, or None for prompts that have no sensible default.
"""

import getpass
from typing import Callable

# Returns an error message, or None if the value is acceptable
Validator = Callable[[str], str | None]


def prompt_validated(message: str, validator: Validator, default: str = "") -> str | None:
    """Prompt until validator accepts the answer. Returns None on EOF."""
    while True:
        if default:
            display = f"{message} [{default}]: "
        else:
            display = f"{message}: "
        try:
            value = input(display).strip() or default
        except EOFError:
            return None
        error = validator(value)
        if error is None:
            return value
        print(f"  {error}")


def prompt_required(message: str) -> str | None:
    """Prompt until a non-empty answer is given. Returns None on EOF."""
    return prompt_validated(message, lambda v: None if v else "A value is required")


def prompt_secret(message: str) -> str | None:
    """Prompt for a non-empty value without echo. Returns None on EOF."""
    while True:
        try:
            value = getpass.getpass(f"{message}: ")
        except EOFError:
            return None
        if value:
            return value
        print("  A value is required")


def prompt_bool(message: str, default: bool = False) -> bool:
    """Prompt user for yes/no answer."""
    default_str = "Y/n" if default else "y/N"
    try:
        value = input(f"{message} [{default_str}]: ").strip().lower()
        if not value:
            return default
        return value in ("y", "yes", "true", "1")
    except EOFError:
        return default


def prompt_choice(message: str, choices: list[tuple[str, str]], default: int = 1) -> str | None:
    """Prompt user to select from numbered choices.

    Args:
        message: Prompt message
        choices: List of (value, description) tuples
        default: 1-indexed default choice

    Returns:
        Selected value, or None if there are no choices
    """
    if not choices:
        return None

    print(f"\n{message}")
    for i, (value, desc) in enumerate(choices, 1):
        marker = "*" if i == default else " "
        print(f"  {marker}{i}. {desc}")

    while True:
        try:
            selection = input(f"Select [1-{len(choices)}, default={default}]: ").strip()
            if not selection:
                return choices[default - 1][0]
            idx = int(selection)
            if 1 <= idx <= len(choices):
                return choices[idx - 1][0]
            print(f"Please enter a number between 1 and {len(choices)}")
        except ValueError:
            print("Please enter a valid number")
        except EOFError:
            return choices[default - 1][0]


def parse_selection(text: str, count: int) -> list[int]:
    """
    Parse "1,3-5 7" into sorted unique 1-based indexes.

    Raises:
        ValueError: If a token is not a number/range or is out of bounds
    """
    indexes: set[int] = set()
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_str, _, end_str = token.partition("-")
            start, end = int(start_str), int(end_str)
            if start > end:
                raise ValueError(f"Invalid range: {token}")
            picked = range(start, end + 1)
        else:
            picked = [int(token)]
        for idx in picked:
            if not 1 <= idx <= count:
                raise ValueError(f"{idx} is out of range 1-{count}")
            indexes.add(idx)
    return sorted(indexes)


def prompt_multiselect(message: str, choices: list[tuple[str, str]], minimum: int = 1) -> list[str] | None:
    """Prompt user to select several numbered choices ("1,3-5").

    Returns:
        Selected values in choice order, or None on EOF
    """
    print(f"\n{message}")
    for i, (_, desc) in enumerate(choices, 1):
        print(f"  {i}. {desc}")

    while True:
        try:
            text = input(f"Select (e.g. 1,3-5) [{len(choices)} available]: ").strip()
        except EOFError:
            return None
        try:
            indexes = parse_selection(text, len(choices))
        except ValueError as e:
            print(f"  {e}")
            continue
        if len(indexes) < minimum:
            print(f"  Select at least {minimum}")
            continue
        return [choices[i - 1][0] for i in indexes]
