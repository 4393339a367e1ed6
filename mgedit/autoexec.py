"""Functions run automatically when a file matching a pattern is read."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from fnmatch import fnmatchcase


@dataclass(frozen=True)
class _Hook:
    pattern: str
    func: Callable


class AutoExecRegistry:
    """Filename patterns paired with the functions to run for them.

    ``functions`` maps command names to the callables they stand for.
    """

    def __init__(self, functions: Mapping[str, Callable]) -> None:
        self.functions = functions
        self._hooks: list[_Hook] = []

    def add_autoexec(self, pattern: str, func: str) -> bool:
        """Register the function named ``func`` for files matching ``pattern``."""
        fp = self.functions.get(func)
        if fp is None:
            return False
        self._hooks.insert(0, _Hook(pattern, fp))
        return True

    def find_autoexec(self, fname: str) -> list[Callable]:
        """Functions to run for ``fname``, most recently registered first."""
        return [hook.func for hook in self._hooks if fnmatchcase(fname, hook.pattern)]

    def auto_execute(self, pattern: str | None, func: str | None) -> bool:
        """Register a hook from user answers; empty answers register nothing."""
        if not pattern or not func:
            return False
        return self.add_autoexec(pattern, func)