"""pytest fixtures for decorated modules.

User overrides decorix_config in their conftest.py.
"""

from __future__ import annotations

import itertools
import re
import sys
import textwrap
from collections.abc import Callable, Iterator
from types import ModuleType
from typing import TYPE_CHECKING

import pytest

from decorix.application.services.compiler import ModuleCompiler
from decorix.domain.model.configuration import DEFAULT_REFLECTION_FUNCTION, ExpansionConfig

if TYPE_CHECKING:
    from decorix.domain.model.reflection import ReflectionTable

_EXPANDED_KEY = pytest.StashKey[dict[str, "ReflectionTable"]]()


def _get_ini_value(config: pytest.Config, name: str, default: str) -> str:
    """Get ini value from pytest config with fallback."""
    value = config.getini(name)
    if value:
        return str(value)
    return default


def expanded_modules(config: pytest.Config) -> dict[str, ReflectionTable]:
    """Reflection tables of the modules expanded in this session, by module name."""
    return config.stash.setdefault(_EXPANDED_KEY, {})


@pytest.fixture(scope="session")
def decorix_config(request: pytest.FixtureRequest) -> ExpansionConfig:
    """Expansion configuration from the ini settings.

    Returns:
        ExpansionConfig (defaults where nothing is configured)
    """
    return ExpansionConfig(
        reflection_function=_get_ini_value(
            request.config, "decorix_reflection_function", DEFAULT_REFLECTION_FUNCTION
        ),
        emit_override_boundaries=bool(request.config.getini("decorix_emit_override_boundaries")),
    )


@pytest.fixture(scope="session")
def decorix_compiler(decorix_config: ExpansionConfig) -> ModuleCompiler:
    """ModuleCompiler using decorix_config."""
    return ModuleCompiler(decorix_config)


@pytest.fixture
def expand_module(
    decorix_compiler: ModuleCompiler,
    request: pytest.FixtureRequest,
) -> Iterator[Callable[..., ModuleType]]:
    """Factory: source snippet → expanded, executed module.

    Source is dedented. Modules are registered in sys.modules for the
    duration of the test and recorded for --decorix-report.

    Usage:
        def test_tag(expand_module):
            module = expand_module('''
                from decorix import decorate, use_decorators
                from tests.decorators import tag
                use_decorators()

                @decorate(tag("a"))
                def f():
                    return []
            ''')
            assert module.f() == ["a"]
    """
    counter = itertools.count()
    prefix = re.sub(r"\W", "_", request.node.name)
    loaded: list[str] = []

    def _expand(source: str, module_name: str | None = None) -> ModuleType:
        name = module_name or f"decorix_snippet_{prefix}_{next(counter)}"
        module = decorix_compiler.load_module(
            textwrap.dedent(source),
            name,
            filename=f"<{name}>",
            register=True,
        )
        loaded.append(name)

        query = getattr(module, decorix_compiler.config.reflection_function, None)
        if callable(query):
            expanded_modules(request.config)[name] = query()
        return module

    yield _expand

    for name in loaded:
        sys.modules.pop(name, None)
