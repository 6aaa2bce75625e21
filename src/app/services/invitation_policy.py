from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class InvitationPolicy:
    """Tunables of the invitation lifecycle, built from ApplicationConfig"""

    validity: timedelta = timedelta(days=7)
    retention: timedelta = timedelta(days=90)
    max_generation_attempts: int = 5
    generation_backoff_seconds: float = 0.05
    notifier_timeout_seconds: float = 5.0
    base_url: str = "http://localhost:3000"

    def accept_url(self, token: str) -> str:
        return f"{self.base_url.rstrip('/')}/onboarding/join?token={token}"
