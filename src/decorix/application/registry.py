"""Decorator registry for decorator-defining modules.

A decorator-defining module declares which (name, arity) pairs it
offers and binds one implementation per pair:

    registry = DecoratorRegistry(__name__, {"tag": 1, "trace": 0})

    @registry.implementation
    def tag(label, body, context):
        ...

The name bound in the defining module is the decorator's stub, which
annotations reference: ``@decorate(tag("a"))``.
"""

from __future__ import annotations

import ast
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType, ModuleType
from typing import TYPE_CHECKING, overload

from decorix.domain.exceptions.registry import (
    DecoratorDefinitionError,
    InvalidExpansionError,
    UndeclaredDecoratorError,
)
from decorix.domain.exceptions.runtime import NotExpandedError
from decorix.domain.model.invocation import DecoratorDeclaration

if TYPE_CHECKING:
    from decorix.domain.model.context import FunctionContext

logger = logging.getLogger(__name__)

Implementation = Callable[..., object]


class DecoratorRegistry:
    """Declared decorators of one defining module.

    Declarations are fixed at construction; implementations are bound
    afterwards with the ``implementation`` decorator.

    Attributes:
        module: Name of the defining module
    """

    def __init__(
        self,
        module: str,
        declarations: Mapping[str, int] | Iterable[tuple[str, int]],
    ) -> None:
        """Initialize registry.

        Args:
            module: Name of the defining module (usually __name__)
            declarations: name → arity mapping, or (name, arity) pairs

        Raises:
            DecoratorDefinitionError: If a (name, arity) pair is declared twice
                or a declaration is malformed (FAIL-FIRST)
        """
        if not module:
            raise ValueError("module must be non-empty string")

        self.module = module
        pairs = declarations.items() if isinstance(declarations, Mapping) else declarations

        self._declarations: dict[tuple[str, int], DecoratorDeclaration] = {}
        for name, arity in pairs:
            try:
                declaration = DecoratorDeclaration(name, arity)
            except (TypeError, ValueError) as e:
                raise DecoratorDefinitionError(module, str(e)) from e

            key = (declaration.name, declaration.arity)
            if key in self._declarations:
                raise DecoratorDefinitionError(module, f"{declaration} is declared twice")
            self._declarations[key] = declaration

        self._implementations: dict[tuple[str, int], Implementation] = {}
        self._stubs: dict[str, DecoratorStub] = {
            name: DecoratorStub(self, name) for name, _ in self._declarations
        }

    def __repr__(self) -> str:
        declared = ", ".join(str(d) for d in self._declarations.values())
        return f"<DecoratorRegistry {self.module}: {declared}>"

    @property
    def declarations(self) -> tuple[DecoratorDeclaration, ...]:
        """Declarations in declaration order."""
        return tuple(self._declarations.values())

    @property
    def stubs(self) -> Mapping[str, DecoratorStub]:
        """Stub per declared name."""
        return MappingProxyType(self._stubs)

    def is_declared(self, name: str, arity: int) -> bool:
        return (name, arity) in self._declarations

    def arities(self, name: str) -> tuple[int, ...]:
        """Declared arities of a name, sorted."""
        return tuple(sorted(arity for declared, arity in self._declarations if declared == name))

    @overload
    def implementation(self, target: Implementation, /) -> DecoratorStub: ...

    @overload
    def implementation(
        self, target: str, /, *, arity: int | None = None
    ) -> Callable[[Implementation], DecoratorStub]: ...

    def implementation(
        self,
        target: Implementation | str,
        /,
        *,
        arity: int | None = None,
    ) -> DecoratorStub | Callable[[Implementation], DecoratorStub]:
        """Bind a function as a decorator implementation.

        Bare form: ``@registry.implementation`` uses the function's name and
        its positional parameter count minus two as arity.
        Explicit form: ``@registry.implementation("tag", arity=2)`` binds
        one arity of a name declared with several arities.

        Returns:
            The stub of the decorator name

        Raises:
            DecoratorDefinitionError: If the name/arity is not declared, is
                already implemented, or the signature does not fit
        """
        if isinstance(target, str):
            name = target

            def bind(func: Implementation) -> DecoratorStub:
                return self._bind(name, arity, func)

            return bind

        return self._bind(target.__name__, arity, target)

    def lookup(self, name: str, arity: int) -> Implementation:
        """Implementation of a declared (name, arity).

        Raises:
            UndeclaredDecoratorError: If (name, arity) is not declared
            DecoratorDefinitionError: If it is declared but not implemented
        """
        if (name, arity) not in self._declarations:
            raise UndeclaredDecoratorError(self.module, name, arity)

        implementation = self._implementations.get((name, arity))
        if implementation is None:
            raise DecoratorDefinitionError(self.module, f"{name}/{arity} has no implementation")
        return implementation

    def _bind(self, name: str, arity: int | None, func: Implementation) -> DecoratorStub:
        declared = self.arities(name)
        if not declared:
            raise DecoratorDefinitionError(self.module, f"{name} is not declared")

        accepted = _accepted_arities(func)
        if arity is None and len(declared) == 1:
            arity = declared[0]
        elif arity is None:
            candidates = [a for a in declared if accepted is None or a in accepted]
            if len(candidates) != 1:
                raise DecoratorDefinitionError(
                    self.module,
                    f"cannot tell which arity of {name} ({declared}) "
                    f"{func.__qualname__} implements; pass arity=",
                )
            arity = candidates[0]

        if arity not in declared:
            raise DecoratorDefinitionError(self.module, f"{name}/{arity} is not declared")
        if accepted is not None and arity not in accepted:
            raise DecoratorDefinitionError(
                self.module,
                f"{func.__qualname__} must accept {arity + 2} positional arguments "
                f"({arity} compile-time arguments, body, context)",
            )
        if (name, arity) in self._implementations:
            raise DecoratorDefinitionError(self.module, f"{name}/{arity} is implemented twice")

        self._implementations[(name, arity)] = func
        logger.debug("bound %s.%s/%d to %s", self.module, name, arity, func.__qualname__)
        return self._stubs[name]


class DecoratorStub:
    """Lightweight invocation stub of one decorator name.

    Referenced from annotations; the expansion pass calls ``expand``.
    Calling the stub itself only happens in modules that were not expanded.
    """

    __slots__ = ("_name", "_registry")

    def __init__(self, registry: DecoratorRegistry, name: str) -> None:
        self._registry = registry
        self._name = name

    def __repr__(self) -> str:
        arities = ", ".join(str(a) for a in self.arities)
        return f"<decorator {self.module}.{self._name}/{arities}>"

    def __call__(self, *args: object) -> object:
        raise NotExpandedError(f"{self.module}.{self._name}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def module(self) -> str:
        return self._registry.module

    @property
    def registry(self) -> DecoratorRegistry:
        return self._registry

    @property
    def arities(self) -> tuple[int, ...]:
        return self._registry.arities(self._name)

    def expand(
        self,
        arguments: tuple[ast.expr, ...],
        body: list[ast.stmt],
        context: FunctionContext,
    ) -> list[ast.stmt]:
        """Run the implementation for len(arguments) on a body.

        Exceptions raised by the implementation propagate unchanged.

        Returns:
            Replacement body

        Raises:
            UndeclaredDecoratorError: If the arity is not declared
            InvalidExpansionError: If the implementation returns no body
        """
        implementation = self._registry.lookup(self._name, len(arguments))
        result = implementation(*arguments, body, context)
        return _as_body(result, f"{self.module}.{self._name}/{len(arguments)}")


def define_decorators(module: str, **arities: int) -> DecoratorRegistry:
    """Keyword shorthand: ``define_decorators(__name__, tag=1, trace=0)``."""
    return DecoratorRegistry(module, arities)


def find_registry(module: ModuleType) -> DecoratorRegistry | None:
    """Registry defined by a module, None if it defines none."""
    for value in vars(module).values():
        if isinstance(value, DecoratorRegistry) and value.module == module.__name__:
            return value
    return None


def _accepted_arities(func: Implementation) -> frozenset[int] | None:
    """Decorator arities a function can implement, None if unbounded."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    required = 0
    optional = 0
    for param in signature.parameters.values():
        match param.kind:
            case inspect.Parameter.VAR_POSITIONAL:
                return None
            case inspect.Parameter.POSITIONAL_ONLY | inspect.Parameter.POSITIONAL_OR_KEYWORD:
                if param.default is inspect.Parameter.empty:
                    required += 1
                else:
                    optional += 1

    # body and context are the last two positional arguments
    return frozenset(
        count - 2 for count in range(required, required + optional + 1) if count >= 2
    )


def _as_body(result: object, decorator: str) -> list[ast.stmt]:
    """Normalize an implementation's return value to a statement list."""
    if isinstance(result, ast.stmt):
        return [result]
    if isinstance(result, list | tuple):
        if not result:
            raise InvalidExpansionError(decorator, "empty body")
        for item in result:
            if not isinstance(item, ast.stmt):
                raise InvalidExpansionError(
                    decorator, f"body contains {type(item).__name__}, expected ast.stmt"
                )
        return list(result)
    raise InvalidExpansionError(
        decorator, f"returned {type(result).__name__}, expected ast.stmt list"
    )
