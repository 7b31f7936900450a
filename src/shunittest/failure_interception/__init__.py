"""Failure interception exports."""

from .failure_interceptor import (
    COMMAND_NOT_FOUND_STATUS,
    FailureInterceptor,
    FailureRecord,
    InterceptedRun,
    InterceptorState,
    describe_signal_status,
)
from .lifecycle_events import (
    CaseFunctionMissing,
    CommandFailed,
    LifecycleCompleted,
    LifecycleEvent,
    LifecyclePhase,
    PhaseStarted,
    ProcessExited,
    SkipRequested,
    parse_event,
    parse_events,
)

__all__ = [
    "COMMAND_NOT_FOUND_STATUS",
    "FailureInterceptor",
    "FailureRecord",
    "InterceptedRun",
    "InterceptorState",
    "describe_signal_status",
    "CaseFunctionMissing",
    "CommandFailed",
    "LifecycleCompleted",
    "LifecycleEvent",
    "LifecyclePhase",
    "PhaseStarted",
    "ProcessExited",
    "SkipRequested",
    "parse_event",
    "parse_events",
]
