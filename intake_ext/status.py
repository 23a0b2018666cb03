from typing import Dict

from intake_ext.errors import ValidationError

OPEN, SLOW, CLOSED = "open", "slow", "closed"

STATUS_DISPLAY: Dict[str, Dict[str, str]] = {
    OPEN:   {"label": "Open for orders",        "emoji": "🟢"},
    SLOW:   {"label": "Slow, may take longer",  "emoji": "🟡"},
    CLOSED: {"label": "Closed for orders",      "emoji": "🔴"},
}

# chat command name -> state
ALIASES = {"open": OPEN, "slow": SLOW, "close": CLOSED, "closed": CLOSED}


class StatusRegister:
    """Availability flag. Lives in memory only, every restart begins at open."""

    def __init__(self):
        self.state = OPEN

    def set(self, state: str) -> str:
        key = ALIASES.get((state or "").strip().lower())
        if key is None:
            raise ValidationError(f"Unknown status {state!r}. Use open, slow or close.", code="invalid_status")
        self.state = key
        return key

    def display(self) -> Dict[str, str]:
        return {"status": self.state, **STATUS_DISPLAY[self.state]}
