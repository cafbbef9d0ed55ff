"""pytest plugin for decorix.

Provides fixtures for testing decorated modules:
    decorix_config: Expansion configuration (override in conftest.py)
    decorix_compiler: ModuleCompiler built from decorix_config
    expand_module: Factory expanding a source snippet into a live module

Configuration (pytest.ini or pyproject.toml):
    decorix_reflection_function: Name of the reflection query
        (default: "__decorated_functions__")
    decorix_emit_override_boundaries: Emit separators between overriding
        clauses (default: true)

Command line:
    --decorix-report: Print the reflection table of every module expanded
        through expand_module in the terminal summary
"""

from __future__ import annotations

from typing import TYPE_CHECKING

# Register fixtures from fixtures module
from decorix.presentation.pytest_plugin.fixtures import (
    decorix_compiler,
    decorix_config,
    expand_module,
    expanded_modules,
)

if TYPE_CHECKING:
    import pytest

# Export fixtures for pytest discovery
__all__ = [
    "decorix_compiler",
    "decorix_config",
    "expand_module",
]


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register the report option and ini settings."""
    group = parser.getgroup("decorix")
    group.addoption(
        "--decorix-report",
        action="store_true",
        default=False,
        help="print reflection tables of modules expanded by expand_module",
    )
    parser.addini(
        "decorix_reflection_function",
        "name of the generated reflection query function",
        default="",
    )
    parser.addini(
        "decorix_emit_override_boundaries",
        "emit separators between overriding clauses",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest plugin with markers."""
    config.addinivalue_line(
        "markers",
        "decorix: mark test as exercising expanded modules",
    )


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    config: pytest.Config,
) -> None:
    """Print collected reflection tables when --decorix-report is given."""
    if not config.getoption("decorix_report"):
        return

    tables = expanded_modules(config)
    if not tables:
        return

    from decorix.application.reporters.console import ReflectionReporter

    terminalreporter.write(ReflectionReporter().report_all(tables))
