"""Letter of Credit State Machine Guard.

Uses python-statemachine to enforce legal state transitions at the domain level.
No matter what the API layer does, an illegal transition (e.g., DOCS_SUBMITTED ->
CANCELLED) will raise TransitionNotAllowed.

The state machine is instantiated per-operation and validates the transition
before any funds move or the stored status changes.

Transition table:
    FUNDED          -> DOCS_SUBMITTED  (exporter_submits_documents)
    FUNDED          -> CANCELLED       (importer_cancels)
    DOCS_SUBMITTED  -> PAID            (verifier_releases_payment)
"""

from __future__ import annotations

from statemachine import State, StateMachine


class LetterOfCreditStateMachine(StateMachine):
    """State machine that guards letter of credit lifecycle transitions.

    Usage:
        sm = LetterOfCreditStateMachine(current_status="FUNDED")
        sm.exporter_submits_documents()  # transitions to DOCS_SUBMITTED
        sm.status                        # "DOCS_SUBMITTED"
    """

    # --- States ---
    FUNDED = State("FUNDED", initial=True)
    DOCS_SUBMITTED = State("DOCS_SUBMITTED")
    PAID = State("PAID", final=True)
    CANCELLED = State("CANCELLED", final=True)

    # --- Events / Transitions ---
    exporter_submits_documents = FUNDED.to(DOCS_SUBMITTED)
    verifier_releases_payment = DOCS_SUBMITTED.to(PAID)

    # Once documents are in, the importer loses unilateral cancellation
    importer_cancels = FUNDED.to(CANCELLED)

    def __init__(self, current_status: str = "FUNDED") -> None:
        """Initialize the state machine at a given status.

        Args:
            current_status: The current LCStatus value (e.g., "FUNDED").
                           Must match one of the State value strings exactly.
        """
        valid_values = {s.value for s in self.states}
        if current_status not in valid_values:
            valid = ", ".join(sorted(valid_values))
            raise ValueError(
                f"Unknown status '{current_status}'. Valid states: {valid}"
            )
        super().__init__(start_value=current_status)

    @property
    def status(self) -> str:
        """Return the current state value as a string (matches LCStatus enum)."""
        return str(self.current_state.value)

    def get_allowed_events(self) -> list[str]:
        """Return a list of event names that can fire from the current state."""
        return [event.id for event in self.allowed_events]


def validate_transition(current_status: str, event_name: str) -> str:
    """Validate a state transition and return the new status.

    Creates a temporary state machine, fires the named event, and returns
    the resulting status string.

    Raises:
        TransitionNotAllowed: If the transition is illegal.
        ValueError: If the status or event name is invalid.
    """
    sm = LetterOfCreditStateMachine(current_status=current_status)

    event_method = getattr(sm, event_name, None)
    if event_method is None or not callable(event_method):
        raise ValueError(
            f"Unknown event '{event_name}'. "
            f"Allowed events from {current_status}: {sm.get_allowed_events()}"
        )

    event_method()
    return sm.status
