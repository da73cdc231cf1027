import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cellcalc._messages import ErrorReply, ValueReply
from cellcalc._runner import ExpressionRunner, parse_number
from cellcalc._sheet import Sheet, SheetReply
from cellcalc._table import VariableTable
from cellcalc._value import Error

from .config import ConfigError, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Cellcalc CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _parse_var_options(options: list[str]) -> dict[str, float]:
    """Parse ``NAME=VALUE`` options into a mapping.

    Raises:
        typer.BadParameter: If an option is malformed.

    """
    variables: dict[str, float] = {}
    for option in options:
        name, sep, raw_value = option.partition("=")
        name = name.strip()
        number = parse_number(raw_value.strip())
        if not sep or not name or number is None:
            msg = f"Expected NAME=NUMBER, got {option!r}"
            raise typer.BadParameter(msg, param_hint="--var")
        variables[name] = number
    return variables


def _build_table(var_options: list[str] | None = None) -> VariableTable:
    """Seed a table from [tool.cellcalc] config, then ``--var`` options."""
    try:
        config = get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    if config.variables:
        logger.debug("Loaded %d variable(s) from config", len(config.variables))
    variables = dict(config.variables)
    variables.update(_parse_var_options(var_options or []))
    return VariableTable.from_numbers(variables)


def _is_failure(reply: SheetReply) -> bool:
    if isinstance(reply, ErrorReply):
        return True
    return isinstance(reply, ValueReply) and isinstance(reply.value, Error)


def _describe(reply: SheetReply) -> str:
    if isinstance(reply, ErrorReply):
        return f"[red]✗ {escape(reply.message)}[/red]"
    if isinstance(reply, ValueReply):
        value = reply.value
        if isinstance(value, Error):
            return f"[red]✗ {escape(value.detail)}[/red]"
        return f"[green]{value}[/green]"
    return "[green]✓ ok[/green]"


@app.command(name="eval")
def eval_expression(
    expression: Annotated[
        str,
        typer.Argument(help="Expression to evaluate, e.g. 'x + 1'"),
    ],
    *,
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="Variable as NAME=NUMBER (repeatable)"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as a JSON reply"),
    ] = False,
) -> None:
    """Evaluate a single expression."""
    table = _build_table(var)
    logger.debug("Evaluating %r against %d variable(s)", expression, len(table))
    result = ExpressionRunner(table).evaluate(expression)

    if as_json:
        typer.echo(ValueReply.of(result).model_dump_json())
    elif isinstance(result, Error):
        err_console.print(f"[red]✗ Error:[/red] {escape(result.detail)}")
    else:
        out_console.print(str(result), highlight=False)

    if isinstance(result, Error):
        raise typer.Exit(code=1)


@app.command()
def run(
    script: Annotated[
        Path,
        typer.Argument(help="File of set/get commands, one per line", exists=True, dir_okay=False),
    ],
    *,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print one JSON reply per command"),
    ] = False,
) -> None:
    """Run a script of sheet commands."""
    sheet = Sheet(_build_table())
    err_console.print(f"[cyan]Running commands from:[/cyan] {script}")
    with script.open(encoding="utf-8") as f:
        results = sheet.run_script(f)

    if as_json:
        for _, reply in results:
            typer.echo(reply.model_dump_json())
    else:
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Command", style="dim")
        table.add_column("Reply")
        for command, reply in results:
            table.add_row(escape(command), _describe(reply))
        out_console.print(Panel(table, title="[bold]Results[/bold]", border_style="cyan"))

    n_failed = sum(1 for _, reply in results if _is_failure(reply))
    if n_failed:
        err_console.print(f"[red]✗ {n_failed} command(s) failed[/red]")
        raise typer.Exit(code=1)
