"""Statement execution interceptors attached to connection options."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Protocol, runtime_checkable


class StatementExecutionStep(str, Enum):
    """Points in statement execution where interceptors are invoked."""

    EXECUTE_STATEMENT = "execute_statement"
    CALL_SPANNER = "call_spanner"


@runtime_checkable
class StatementExecutionInterceptor(Protocol):
    """Protocol implemented by statement execution interceptors."""

    def intercept(self, statement: str, step: StatementExecutionStep, transaction: Any) -> None:
        """Observe a statement before it reaches the given step."""


def ensure_interceptors(
    interceptors: Iterable[object],
) -> tuple[StatementExecutionInterceptor, ...]:
    """Validate and freeze a sequence of interceptors."""

    result: list[StatementExecutionInterceptor] = []
    for interceptor in interceptors:
        if not isinstance(interceptor, StatementExecutionInterceptor):
            raise TypeError(
                f"{type(interceptor).__name__} does not implement StatementExecutionInterceptor"
            )
        result.append(interceptor)
    return tuple(result)


def run_interceptors(
    interceptors: Iterable[StatementExecutionInterceptor],
    statement: str,
    step: StatementExecutionStep,
    transaction: Any = None,
) -> None:
    for interceptor in interceptors:
        interceptor.intercept(statement, step, transaction)


__all__ = [
    "StatementExecutionInterceptor",
    "StatementExecutionStep",
    "ensure_interceptors",
    "run_interceptors",
]
