"""Decision prompt rendering.

The prompt is a deterministic function of the UserContext: the same
context always yields the same text.  The model sees the user's email and
timezone, emotional state, streaks, habits, open tasks and derived
metrics, and is asked for exactly one JSON object.
"""

from __future__ import annotations

from anchor_ai.core.metrics import ContextMetrics, compute_metrics
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.enums import DecisionAction

_DECISION_PROMPT = """You are Anchor's AI decision engine. Your role is to make supportive, emotion-aware decisions for users building productive habits without guilt or burnout.

CONTEXT:
- User: {email} (timezone: {timezone})
- Current emotion: {emotion}{emotion_notes}
- Recent emotions (7 days): [{recent_emotions}]
- Active streaks: {active_streaks}
- Today's completions: {today_completions}
- Missed yesterday in current streak: {missed_yesterday}
- 7-day consistency score: {consistency:.2f}

CURRENT STREAKS:
{streak_lines}

ACTIVE HABITS:
{habit_lines}

TODAY'S TASKS:
{task_lines}

DECISION PRINCIPLES:
1. NEVER use guilt, shame, or fear-based messaging
2. Optimize for long-term consistency over short-term intensity
3. Adapt pressure based on emotional state:
   - Energized: Can handle normal/higher difficulty
   - Okay: Maintain current approach
   - Low: Reduce pressure, offer easier alternatives
   - Overwhelmed: Enter recovery mode, minimal pressure
4. Use streak states strategically:
   - Normal: Regular pressure and expectations
   - Recovery: Lower expectations, focus on showing up
   - Protected: Maintain streak even with minimal effort
5. "no_action" is a legitimate decision: sometimes the best action is no action

DECISION OPTIONS:
1. pressure_adjustment: Modify habit difficulty
2. streak_state_change: Change streak state (normal/recovery/protected)
3. notification: Send a supportive message
4. task_modification: Adjust today's task effort estimates
5. no_action: Leave everything as it is

Respond with ONLY a single JSON object in this format:
{{
  "action": "{action_values}",
  "reasoning": "Clear explanation of why this decision was made",
  "confidence": 0.85,
  "parameters": {{
    "new_difficulty": 2,
    "new_streak_state": "recovery",
    "notification_type": "gentle_encouragement",
    "notification_tone": "supportive",
    "task_modifications": [
      {{"task_id": "uuid", "new_effort": 2}}
    ],
    "habit_ids": ["optional: limit a difficulty change to these habits"],
    "streak_ids": ["optional: limit a state change to these streaks"]
  }}
}}

Make a decision now based on the current context:"""


def _streak_lines(context: UserContext) -> str:
    if not context.streaks:
        return "- none"
    return "\n".join(
        f'- [{s.id}] "{s.title}": {s.current_count} days '
        f"(longest: {s.longest_count}), state: {s.state.value}"
        for s in context.streaks
    )


def _habit_lines(context: UserContext) -> str:
    habits = [h for h in context.habits if h.is_active]
    if not habits:
        return "- none"
    return "\n".join(
        f'- [{h.id}] "{h.title}": difficulty {h.difficulty_level}/5, {h.estimated_minutes} min'
        for h in habits
    )


def _task_lines(context: UserContext) -> str:
    tasks = [t for t in context.tasks if not t.is_completed]
    if not tasks:
        return "- none"
    return "\n".join(
        f'- [{t.id}] "{t.title}": effort {t.estimated_effort}/5'
        for t in tasks
    )


def build_prompt(context: UserContext, metrics: ContextMetrics | None = None) -> str:
    """Render the decision prompt for *context*."""
    metrics = metrics or compute_metrics(context)
    emotion = context.emotion
    return _DECISION_PROMPT.format(
        email=context.profile.email,
        timezone=context.profile.timezone,
        emotion=emotion.emotion.value if emotion else "unknown",
        emotion_notes=f" (notes: {emotion.notes})" if emotion and emotion.notes else "",
        recent_emotions=", ".join(metrics.recent_emotions),
        active_streaks=sum(1 for s in context.streaks if s.is_active),
        today_completions=metrics.today_completions,
        missed_yesterday="yes" if metrics.missed_yesterday else "no",
        consistency=metrics.consistency_score,
        streak_lines=_streak_lines(context),
        habit_lines=_habit_lines(context),
        task_lines=_task_lines(context),
        action_values="|".join(a.value for a in DecisionAction),
    )
