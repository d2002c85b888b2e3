"""Tests for running nviz as a module (`python -m nviz`)."""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest


def test_module_help_exits_zero() -> None:
    with patch("sys.argv", ["nviz", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("nviz", run_name="__main__")
    assert exc_info.value.code == 0


def test_module_view_help_exits_zero(capsys) -> None:
    with patch("sys.argv", ["nviz", "view", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("nviz", run_name="__main__")
    assert exc_info.value.code == 0
    assert "--include-neighbors" in capsys.readouterr().out
