"""Shared pytest fixtures for Sphinx log tests."""

from __future__ import annotations

import io
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List

import pytest

NOW = datetime(2024, 5, 1, 12, 0, 0)


class FailingReadFile(io.BytesIO):
    """An open log whose reads fail, like /proc/self/mem."""

    def read(self, size=-1):
        raise OSError(22, "Invalid argument")


def sphinx_ts(dt: datetime, millis: bool = False) -> str:
    """Format a datetime the way searchd writes it."""
    text = dt.strftime("%a %b %d %H:%M:%S")
    if millis:
        text += f".{dt.microsecond // 1000:03d}"
    return f"{text} {dt.year}"


def query_line(
    dt: datetime, time_spent: float = 0.5, results: int = 20, query: str = "laptop"
) -> str:
    return f"[{sphinx_ts(dt)}] {time_spent:.3f} sec [ext2/0/rel {results} (0,20)] [products] {query}"


def searchd_line(dt: datetime, message: str) -> str:
    return f"[{sphinx_ts(dt, millis=True)}] [12345] {message}"


def ago(seconds: float, now: datetime = NOW) -> datetime:
    return now - timedelta(seconds=seconds)


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[[str, List[str]], Path]:
    """Write lines, oldest first, to a log file under tmp_path."""

    def _write(name: str, lines: List[str]) -> Path:
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write
