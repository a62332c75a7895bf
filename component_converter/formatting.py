"""Output formatting collaborators."""

from __future__ import annotations

import asyncio
import inspect
import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from .config import Target

logger = logging.getLogger(__name__)


@runtime_checkable
class Formatter(Protocol):
    """Anything with ``format(text, target)``; the method may be a coroutine."""

    def format(self, text: str, target: Target):  # pragma: no cover - typing helper
        ...


@dataclass
class WhitespaceFormatter:
    """Trim trailing whitespace, collapse runs of blank lines and end with a newline."""

    max_empty_lines: int = 1
    trim_trailing_whitespace: bool = True
    insert_final_newline: bool = True

    def format(self, text: str, target: Target) -> str:
        lines = text.split("\n")
        if self.trim_trailing_whitespace:
            lines = [line.rstrip() for line in lines]

        cleaned: List[str] = []
        consecutive_empty = 0
        for line in lines:
            if not line.strip():
                consecutive_empty += 1
                if consecutive_empty <= self.max_empty_lines:
                    cleaned.append(line)
            else:
                consecutive_empty = 0
                cleaned.append(line)

        result = "\n".join(cleaned).strip("\n")
        if self.insert_final_newline:
            result += "\n"
        return result


class FormatterError(RuntimeError):
    """Raised by formatters that could not produce output."""


class PrettierFormatter:
    """Formats through ``npx prettier`` with the Svelte or Vue parser."""

    PARSERS = {Target.SVELTE: "svelte", Target.VUE: "vue"}

    def __init__(self, command: Sequence[str] = ("npx", "--no-install", "prettier"), timeout: float = 10.0) -> None:
        self.command = list(command)
        self.timeout = timeout

    def format(self, text: str, target: Target) -> str:
        if shutil.which(self.command[0]) is None:
            raise FormatterError(f"{self.command[0]} is not available on PATH")
        parser = self.PARSERS[Target.parse(target)]
        try:
            result = subprocess.run(
                [*self.command, "--parser", parser],
                input=text,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise FormatterError(f"prettier timed out after {self.timeout}s") from exc
        if result.returncode != 0:
            raise FormatterError(result.stderr.strip() or f"prettier exited with {result.returncode}")
        return result.stdout


async def format_code(
    text: str,
    target: Target,
    formatter: Formatter,
    *,
    timeout: float = 10.0,
    warnings: Optional[List[str]] = None,
) -> str:
    """
    Run ``formatter`` with a timeout.

    Synchronous formatters run in a worker thread. Any failure, including the
    timeout, returns ``text`` unchanged and appends a warning.
    """

    async def _call() -> str:
        method = formatter.format
        if inspect.iscoroutinefunction(method):
            return await method(text, target)
        result = await asyncio.to_thread(method, text, target)
        if inspect.isawaitable(result):
            result = await result
        return result

    try:
        formatted = await asyncio.wait_for(_call(), timeout=timeout)
    except asyncio.TimeoutError:
        message = f"Formatting timed out after {timeout}s, returning unformatted output"
    except Exception as exc:
        message = f"Formatting failed, returning unformatted output: {exc}"
    else:
        if isinstance(formatted, str):
            return formatted
        message = "Formatter returned no text, returning unformatted output"
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)
    return text


__all__ = ["Formatter", "FormatterError", "WhitespaceFormatter", "PrettierFormatter", "format_code"]
