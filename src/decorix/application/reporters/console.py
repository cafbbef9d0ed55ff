"""Console reporter: reflection tables → rich formatted string."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from decorix.domain.model.reflection import AppliedDecorator, ReflectionTable


@dataclass(frozen=True, slots=True)
class ReportConfig:
    """Configuration for the reflection reporter.

    Attributes:
        show_arguments: Show decorator arguments; arity only when False.
        width: Console width in columns.
    """

    show_arguments: bool = True
    width: int = 120

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")


def format_applied(applied: AppliedDecorator, show_arguments: bool = True) -> str:
    """Format one applied decorator, e.g. ``app.tracing.tag('a')``."""
    if not show_arguments:
        return f"{applied.module}.{applied.name}/{len(applied.arguments)}"
    arguments = ", ".join(repr(argument) for argument in applied.arguments)
    return f"{applied.module}.{applied.name}({arguments})"


class ReflectionReporter:
    """Renders reflection tables.

    Output is str, not print(). Caller decides destination.
    """

    def __init__(self, config: ReportConfig | None = None) -> None:
        self._config = config or ReportConfig()

    def report(self, module: str, table: ReflectionTable) -> str:
        """Format the reflection table of one module.

        Args:
            module: Module name shown in the header
            table: Reflection table of the module

        Returns:
            Formatted string with colors and a table per module.
        """
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self._config.width)
        self._render(console, module, table)
        return output.getvalue()

    def report_all(self, tables: Mapping[str, ReflectionTable]) -> str:
        """Format several modules, in the order given."""
        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self._config.width)
        for module, table in tables.items():
            self._render(console, module, table)
        return output.getvalue()

    def _render(self, console: Console, module: str, table: ReflectionTable) -> None:
        console.print()
        console.rule(f"[bold]DECORATED FUNCTIONS[/bold] {escape(module)}")
        console.print()

        if not table:
            console.print("[dim]no decorated functions[/dim]")
            console.print()
            return

        total = sum(len(applied) for applied in table.values())
        console.print(f"[bold]Functions:[/bold] {len(table)} [bold]Decorators:[/bold] {total}")
        console.print()

        grid = Table(show_header=True, header_style="bold")
        grid.add_column("Function", style="yellow", no_wrap=True)
        grid.add_column("Parameters", no_wrap=True)
        grid.add_column("Decorators (outermost first)")

        for (name, params_text), applied in table.items():
            decorators = "\n".join(
                escape(format_applied(entry, self._config.show_arguments)) for entry in applied
            )
            grid.add_row(escape(name), escape(params_text), decorators)

        console.print(grid)
        console.print()
