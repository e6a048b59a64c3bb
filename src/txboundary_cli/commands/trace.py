from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import typer

from txboundary.errors import PersistenceError
from txboundary.interceptor import TransactionInterceptor
from txboundary.ports import HandleState
from txboundary.result import Ok, Result
from txboundary.testkit import CapturingLogger, InMemoryTransaction, StaticProvider


class ScenarioFailure(Exception):
    """Raised by the traced operation when a failure is requested."""


@dataclass
class TraceReport:
    initial: HandleState
    outcome: Result[Any, Exception]
    handle: InMemoryTransaction
    logger: CapturingLogger


def run_trace(
    *,
    outer: bool = False,
    fail: bool = False,
    nested_fail: bool = False,
    fail_commit: bool = False,
    fail_rollback: bool = False,
) -> TraceReport:
    """
    Run one interception against an in-memory handle.

    - outer: the handle is already active, so the call joins it
    - fail: the operation raises ScenarioFailure
    - nested_fail: the operation first runs a nested interception that fails;
      the operation recovers from it, leaving the handle rollback-only
    - fail_commit / fail_rollback: inject PersistenceError into the handle
    """
    fail_on: Dict[str, BaseException] = {}
    if fail_commit:
        fail_on["commit"] = PersistenceError("injected commit failure")
    if fail_rollback:
        fail_on["rollback"] = PersistenceError("injected rollback failure")

    handle = InMemoryTransaction(name="trace", active=outer, fail_on=fail_on)
    logger = CapturingLogger()
    interceptor = TransactionInterceptor(StaticProvider(handle), logger=logger)
    initial = handle.state

    def nested() -> None:
        raise ScenarioFailure("nested operation failed")

    def operation() -> str:
        if nested_fail:
            interceptor.intercept(nested)
        if fail:
            raise ScenarioFailure("operation failed")
        return "done"

    outcome = interceptor.intercept(operation)
    return TraceReport(initial=initial, outcome=outcome, handle=handle, logger=logger)


def trace_cmd(
    *,
    outer: bool = False,
    fail: bool = False,
    nested_fail: bool = False,
    fail_commit: bool = False,
    fail_rollback: bool = False,
    verbose: bool = False,
) -> None:
    report = run_trace(
        outer=outer,
        fail=fail,
        nested_fail=nested_fail,
        fail_commit=fail_commit,
        fail_rollback=fail_rollback,
    )

    typer.echo(f"initial: {report.initial.value}")
    for call, before, after in report.handle.history:
        typer.echo(f"{call}: {before.value} -> {after.value}")
    typer.echo(f"final: {report.handle.state.value}")

    if verbose:
        for rec in report.logger.records:
            typer.echo(f"[{rec['level']}] {rec['msg']}")

    if isinstance(report.outcome, Ok):
        typer.secho(f"outcome: ok {report.outcome.value!r}", fg=typer.colors.GREEN)
        return
    error = report.outcome.unwrap_err()
    typer.secho(
        f"outcome: err {type(error).__name__}: {error}", fg=typer.colors.RED
    )
    raise typer.Exit(1)
