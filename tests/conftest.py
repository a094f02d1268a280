"""Shared fixtures for the finance tracker tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from budget_core import FinanceSession, Ledger, Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path)


@pytest.fixture
def session(settings: Settings) -> FinanceSession:
    return FinanceSession(settings)


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


def scripted_input(lines: Iterable[str]) -> Callable[[str], str]:
    """Feed canned answers to a prompt callable, then behave like a closed stdin."""

    remaining = iter(lines)

    def _input(prompt: str) -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError from None

    return _input


@pytest.fixture
def scripted() -> Callable[[Iterable[str]], Callable[[str], str]]:
    return scripted_input
