"""Single source of truth for one poller's job lifecycle state."""

from __future__ import annotations

import logging
from typing import Callable, Final

from .errors import InvalidJobTransitionError
from .states import Cancelled, Completed, Failed, Idle, JobState, Pending, Submitting, job_state_label

logger = logging.getLogger(__name__)

StateObserver = Callable[[JobState], None]

_ALLOWED_TRANSITIONS: Final[dict[type, frozenset[type]]] = {
    Idle: frozenset({Submitting}),
    Submitting: frozenset({Completed, Failed, Pending, Submitting}),
    Pending: frozenset({Completed, Failed, Cancelled, Pending}),
    Completed: frozenset({Submitting}),
    Failed: frozenset({Submitting}),
    Cancelled: frozenset({Submitting}),
}


class JobStateMachine:
    """Validated job lifecycle state holder with observer notification.

    The machine has exactly one writer (the owning poller) and any number of
    read-only observers. Observers are called synchronously after every
    transition that changes the state value.
    """

    def __init__(self) -> None:
        self._state: JobState = Idle()
        self._observers: list[StateObserver] = []

    def machine_state(self) -> JobState:
        """Return the current lifecycle state.

        Returns:
            JobState: Current state value.
        """

        return self._state

    def machine_can_transition(self, target: JobState) -> bool:
        """Return whether the transition table allows moving to `target`.

        Args:
            target: Candidate next state.

        Returns:
            bool: True when the edge exists.
        """

        return type(target) in _ALLOWED_TRANSITIONS[type(self._state)]

    def machine_transition(self, target: JobState) -> bool:
        """Move to `target` and notify observers.

        A transition to a value equal to the current state (a pending self-loop
        with an unchanged label) is accepted without notification.

        Args:
            target: Next state.

        Returns:
            bool: True when the state value changed.

        Raises:
            InvalidJobTransitionError: Raised when the edge is not in the transition table.
        """

        if not self.machine_can_transition(target):
            raise InvalidJobTransitionError(
                f"transition not allowed: {job_state_label(self._state)} -> {job_state_label(target)}"
            )
        if target == self._state:
            return False

        previous_state = self._state
        self._state = target
        logger.debug("job state %s -> %s", job_state_label(previous_state), job_state_label(target))
        self._machine_notify(target)
        return True

    def machine_subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer called with the new state after every transition.

        Args:
            observer: Callback receiving the new state.

        Returns:
            Callable[[], None]: Callable that removes the observer.
        """

        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _machine_notify(self, state: JobState) -> None:
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("job state observer failed for state=%s", job_state_label(state))
