"""Static notification copy, keyed by tone.

The decision's reasoning is the body of every message; the tone only
chooses the subject line and the framing around it.
"""

from __future__ import annotations

from anchor_ai.domain.enums import NotificationTone

_SUBJECTS: dict[NotificationTone, str] = {
    NotificationTone.SUPPORTIVE: "You're doing great - here's a gentle nudge",
    NotificationTone.ENCOURAGING: "Keep up the momentum!",
    NotificationTone.GENTLE: "A friendly reminder from Anchor",
}

_BODIES: dict[NotificationTone, str] = {
    NotificationTone.SUPPORTIVE: (
        "Hi there,\n\n{reasoning}\n\n"
        "Remember, progress isn't about perfection - it's about showing up "
        "consistently. You've got this!\n\nBest,\nThe Anchor Team"
    ),
    NotificationTone.ENCOURAGING: (
        "Hello!\n\n{reasoning}\n\n"
        "You're building something meaningful. Every small step counts!\n\n"
        "Keep going,\nAnchor"
    ),
    NotificationTone.GENTLE: (
        "Hi,\n\n{reasoning}\n\n"
        "Take it easy on yourself. We're here to support your journey.\n\n"
        "With care,\nAnchor"
    ),
}


def compose_notification(reasoning: str, tone: NotificationTone | None) -> tuple[str, str]:
    """Return ``(subject, content)``; unknown or missing tone means supportive."""
    if tone not in _SUBJECTS:
        tone = NotificationTone.SUPPORTIVE
    return _SUBJECTS[tone], _BODIES[tone].format(reasoning=reasoning)
