"""Fan-out/fan-in engine and the substrates it runs on.

Key Components:
    - Substrate: spawn / await / request-cancel protocol over an external
      scheduler (AsyncioSubstrate, ExecutorSubstrate)
    - WorkUnit: one element plus the operation, identified by input index
    - JoinBarrier: waits for every unit, first error wins, siblings cancelled
    - fan_out: one unit per element, results in input order
    - Cooperative cancellation: cancel_requested, raise_if_cancelled, checkpoint

Design Philosophy:
    - Structured concurrency: units don't outlive the call that spawned them
    - Fail-fast: first observed error requests cancellation of siblings
    - Positional fan-in: result order never depends on completion order
"""

from __future__ import annotations

from ...foundation.priority import Priority
from .barrier import JoinBarrier
from .cancel import CancelToken, cancel_requested, checkpoint, current_token, raise_if_cancelled
from .fanout import fan_out, resolve_priority
from .interop import invoke
from .substrate import (
    AsyncioSubstrate,
    ExecutorSubstrate,
    Substrate,
    get_substrate,
    shutdown_default_substrates,
)
from .task import UnitState, WorkUnit

__all__ = [
    "Priority",
    # Substrates
    "Substrate",
    "AsyncioSubstrate",
    "ExecutorSubstrate",
    "get_substrate",
    "shutdown_default_substrates",
    # Units & barrier
    "WorkUnit",
    "UnitState",
    "JoinBarrier",
    "fan_out",
    "resolve_priority",
    # Cancellation
    "CancelToken",
    "current_token",
    "cancel_requested",
    "raise_if_cancelled",
    "checkpoint",
    # Interop
    "invoke",
]
