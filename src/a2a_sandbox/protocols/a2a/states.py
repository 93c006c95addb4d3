"""Task state machine.

submitted -> working -> (input-required <-> working) -> completed | failed | canceled

``canceled`` is reachable only through explicit cancellation; the JSON-RPC
handler keeps executors from producing it.
"""

from a2a_sandbox.protocols.a2a.models import TERMINAL_STATES, TaskState

ALLOWED_TRANSITIONS: dict[TaskState, frozenset[TaskState]] = {
    TaskState.SUBMITTED: frozenset(
        {TaskState.WORKING, TaskState.FAILED, TaskState.CANCELED}
    ),
    TaskState.WORKING: frozenset(
        {
            TaskState.WORKING,
            TaskState.INPUT_REQUIRED,
            TaskState.COMPLETED,
            TaskState.FAILED,
            TaskState.CANCELED,
        }
    ),
    TaskState.INPUT_REQUIRED: frozenset(
        {TaskState.WORKING, TaskState.FAILED, TaskState.CANCELED}
    ),
    TaskState.COMPLETED: frozenset(),
    TaskState.FAILED: frozenset(),
    TaskState.CANCELED: frozenset(),
}

# States an executor may hand back after running
EXECUTOR_RESULT_STATES = frozenset(
    {TaskState.WORKING, TaskState.INPUT_REQUIRED, TaskState.COMPLETED, TaskState.FAILED}
)


def is_terminal(state: TaskState | str) -> bool:
    """Check whether a state admits no further transitions."""
    return TaskState(state) in TERMINAL_STATES


def can_transition(current: TaskState | str, requested: TaskState | str) -> bool:
    """Check a single edge of the state graph."""
    return TaskState(requested) in ALLOWED_TRANSITIONS[TaskState(current)]
