"""Diagnostics CLI for ``lib_context_log`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators preview how records render under the current environment
settings without writing Python. The library API lives in
:mod:`lib_context_log.core`; this module only drives it.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_emit` – routes one record through the facade.
* :func:`cli_fail` – raises the deterministic test failure.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: it builds a logger, binds it with
:func:`~lib_context_log.core.with_logger` and emits with
:func:`~lib_context_log.core.log`. ``lib_cli_exit_tools`` centralises the exit
code strategy.
"""

from __future__ import annotations

import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import STREAMS, load_settings
from .adapters.formatters.structured import FORMATS
from .adapters.stdlib.logger import new_logger
from .core import log, with_, with_group, with_logger
from .domain.context import background
from .domain.errors import InvalidLevel
from .domain.levels import parse_level
from .testing import i_should_fail

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_context_log"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Context-propagated structured logging facade",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_context_log version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo("lib_context_log (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.command("emit", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.argument("fields", nargs=-1)
@click.option("--level", "level_text", default="info", show_default=True, help="Record level (name, name+n or number)")
@click.option("--group", "groups", multiple=True, help="Group that qualifies the fields (repeatable, outermost first)")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS, case_sensitive=False),
    default=None,
    help="Output format; defaults to LIB_CONTEXT_LOG_FORMAT",
)
@click.option(
    "--stream",
    type=click.Choice(STREAMS, case_sensitive=False),
    default="stdout",
    show_default=True,
    help="Stream the record is written to",
)
def cli_emit(
    message: str,
    fields: Sequence[str],
    level_text: str,
    groups: Sequence[str],
    fmt: Optional[str],
    stream: str,
) -> None:
    """Emit MESSAGE with KEY=VALUE FIELDS through the facade.

    The threshold comes from ``LIB_CONTEXT_LOG_LEVEL``; a record below it
    prints nothing.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["emit", "hello", "user=ada", "--format", "json"], env={})
    >>> '"msg": "hello", "user": "ada"' in result.output
    True
    """

    level = _parse_level_option(level_text)
    pairs = _parse_fields(fields)
    settings = load_settings()
    target = sys.stdout if stream.lower() == "stdout" else sys.stderr
    logger = new_logger(
        "lib_context_log.cli",
        stream=target,
        level=settings.level,
        fmt=(fmt or settings.fmt).lower(),
    )
    ctx = with_logger(background(), logger)
    for name in groups:
        ctx = with_group(ctx, name)
    ctx = with_(ctx, *pairs)
    log(ctx, level, message)


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Trigger a deterministic error for testing traceback handling.

    This mirrors the helper exposed by `lib_context_log.testing.i_should_fail`.
    """

    i_should_fail()


def _parse_level_option(text: str) -> int:
    """Translate ``--level`` into a number or raise :class:`click.BadParameter`."""

    try:
        return parse_level(text)
    except InvalidLevel as exc:
        raise click.BadParameter(str(exc), param_hint="--level") from exc


def _parse_fields(values: Sequence[str]) -> list[str]:
    """Flatten ``KEY=VALUE`` arguments into alternating key/value items.

    >>> _parse_fields(["a=1", "b=x=y"])
    ['a', '1', 'b', 'x=y']
    """

    pairs: list[str] = []
    for value in values:
        key, found, rest = value.partition("=")
        if not found or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint="FIELDS")
        pairs.extend((key, rest))
    return pairs


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
