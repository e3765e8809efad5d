# cli.py
from __future__ import annotations

import sys

import click

from mymake.errors import MakeError
from mymake.runner import DEFAULT_RULE_FILE, RULE_FILE_ENV, load_rules, make
from mymake.ui.console import Console, get_console, set_console


def report_error(err: MakeError) -> None:
    """One diagnostic per fatal error, on stderr."""
    console = get_console()
    console.print_error(
        err.kind,
        err.message,
        details=[f"{k}={v}" for k, v in err.details.items()] or None,
    )


rule_file_option = click.option(
    "-f",
    "--file",
    "rule_file",
    default=DEFAULT_RULE_FILE,
    envvar=RULE_FILE_ENV,
    show_default=True,
    help=f"Rule file to read (env: {RULE_FILE_ENV})",
)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and staleness decisions)",
)
def cli(debug):
    """mymake: a small incremental build tool."""
    set_console(Console(debug=debug))


@cli.command()
@rule_file_option
@click.argument("target", required=False)
def build(rule_file, target):
    """Bring TARGET (default: the first target in the rule file) up to date."""
    console = get_console()
    console.print_debug(f"rule file: {rule_file}")

    try:
        result = make(rule_file, target)
    except MakeError as e:
        report_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    if result.up_to_date:
        console.print_up_to_date(result.target)
    if result.cycles:
        console.print_debug(f"{len(result.cycles)} cycle(s) ignored")


@cli.command()
@rule_file_option
def show(rule_file):
    """Print the dependency graph read from the rule file."""
    console = get_console()

    try:
        rules = load_rules(rule_file)
    except MakeError as e:
        report_error(e)
        sys.exit(1)

    try:
        console.print_graph(rules.graph)
    finally:
        rules.graph.release()


if __name__ == "__main__":
    cli()
