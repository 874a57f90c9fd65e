"""Listing State Machine Guard.

Uses python-statemachine to enforce legal listing transitions at the domain
level. The engine instantiates one per operation, at the listing's stored
status, and fires the event before committing any field change.

Transition table:
    OPEN  -> SOLD     (purchase)
    OPEN  -> ABORTED  (cancel)
    SOLD  -> SETTLED  (settle)

SETTLED and ABORTED are final. Withdrawing one of two balances leaves the
listing in SOLD; settle fires once both balances are zero.
"""

from __future__ import annotations

from statemachine import State, StateMachine


class ListingStateMachine(StateMachine):
    """State machine that guards listing lifecycle transitions.

    Usage:
        sm = ListingStateMachine(current_status="OPEN")
        sm.purchase()      # transitions to SOLD
        sm.status          # "SOLD"
    """

    # --- States ---
    OPEN = State("OPEN", initial=True)
    SOLD = State("SOLD")
    SETTLED = State("SETTLED", final=True)
    ABORTED = State("ABORTED", final=True)

    # --- Events / Transitions ---
    purchase = OPEN.to(SOLD)
    cancel = OPEN.to(ABORTED)
    settle = SOLD.to(SETTLED)

    def __init__(self, current_status: str = "OPEN") -> None:
        """Initialize the state machine at a given status.

        Args:
            current_status: The current ListingStatus value (e.g., "SOLD").
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
        """Return the current state value as a string (matches ListingStatus)."""
        return str(self.current_state.value)

    def get_allowed_events(self) -> list[str]:
        """Return the event names that can fire from the current state."""
        return [event.id for event in self.allowed_events]


def validate_transition(current_status: str, event_name: str) -> str:
    """Validate a transition and return the resulting status.

    Raises:
        TransitionNotAllowed: If the transition is illegal.
        ValueError: If the status or event name is unknown.
    """
    sm = ListingStateMachine(current_status=current_status)

    event_method = getattr(sm, event_name, None)
    if event_method is None or not callable(event_method):
        raise ValueError(
            f"Unknown event '{event_name}'. "
            f"Allowed events from {current_status}: {sm.get_allowed_events()}"
        )

    event_method()
    return sm.status
