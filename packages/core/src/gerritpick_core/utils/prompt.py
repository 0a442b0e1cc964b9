from __future__ import annotations

from typing import Callable

_YES = ("y", "yes")

Confirm = Callable[[str], bool]


def confirm(prompt: str, input_fn: Callable[[str], str] = input) -> bool:
    """Ask a blocking (y/N) question; anything other than y/yes is a no."""
    answer = input_fn(f"{prompt} (y/N) " if prompt else "(y/N) ")
    return answer.strip().lower() in _YES
