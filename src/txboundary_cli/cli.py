from __future__ import annotations

import typer

from .commands.trace import trace_cmd

app = typer.Typer(help="txboundary developer CLI")


@app.callback()
def root() -> None:
    """
    Inspect how the transaction interceptor drives a handle.
    """


@app.command("trace")
def trace(
    outer: bool = typer.Option(
        False, "--outer", help="Start with an already active (enclosing) transaction"
    ),
    fail: bool = typer.Option(False, "--fail", help="Make the operation raise"),
    nested_fail: bool = typer.Option(
        False, "--nested-fail", help="Run a failing nested interception first"
    ),
    fail_commit: bool = typer.Option(
        False, "--fail-commit", help="Inject a commit failure"
    ),
    fail_rollback: bool = typer.Option(
        False, "--fail-rollback", help="Inject a rollback failure"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print log records"),
):
    """
    Run one interception against an in-memory handle and print each transition.
    Exits 1 when the outcome is a failure.
    """
    trace_cmd(
        outer=outer,
        fail=fail,
        nested_fail=nested_fail,
        fail_commit=fail_commit,
        fail_rollback=fail_rollback,
        verbose=verbose,
    )


def main():
    app()


__all__ = ["app", "main"]
