"""DecisionExecutor — applies a Decision's side effect and records the outcome.

Dispatch over ``Decision.action``:
    pressure_adjustment  → assign new_difficulty to active habits
    streak_state_change  → assign new_streak_state to active streaks
    notification         → create one Notification linked to the log
    task_modification    → assign new_effort to each named task of the user
    no_action            → nothing, recorded explicitly

Mutations are assignments, so executing the same decision twice ends in
the same state.  A failing mutation never propagates: it is recorded on
the decision log as ``{success: false, error}`` and ``execute`` returns
False.  Only a failure to write the outcome itself escapes.
"""

from __future__ import annotations

import logging

from anchor_ai.core.notifications import compose_notification
from anchor_ai.domain.decision import Decision
from anchor_ai.domain.enums import DecisionAction
from anchor_ai.domain.records import DecisionOutcome, Notification
from anchor_ai.foundation.clock import utc_now
from anchor_ai.store.base import HabitStore

logger = logging.getLogger(__name__)


class DecisionExecutor:
    def __init__(self, store: HabitStore) -> None:
        self._store = store

    async def execute(self, user_id: str, decision: Decision, decision_log_id: str) -> bool:
        """Apply *decision* for *user_id* and attach the outcome to the log."""
        try:
            actions = await self._apply(user_id, decision, decision_log_id)
        except Exception as exc:
            logger.exception("Failed to execute decision %s for user %s", decision_log_id, user_id)
            await self._store.attach_decision_outcome(
                decision_log_id,
                utc_now(),
                DecisionOutcome(success=False, error=str(exc)),
            )
            return False

        await self._store.attach_decision_outcome(
            decision_log_id,
            utc_now(),
            DecisionOutcome(success=True, actions=actions),
        )
        logger.info("Executed decision %s for user %s: %s", decision_log_id, user_id, actions)
        return True

    async def _apply(self, user_id: str, decision: Decision, decision_log_id: str) -> list[str]:
        params = decision.parameters
        actions: list[str] = []

        if decision.action == DecisionAction.PRESSURE_ADJUSTMENT:
            if params is not None and params.new_difficulty is not None:
                changed = await self._store.set_habit_difficulty(
                    user_id, params.new_difficulty, params.habit_ids,
                )
                logger.debug("Adjusted difficulty on %d habit(s)", changed)
                actions.append("difficulty_adjusted")

        elif decision.action == DecisionAction.STREAK_STATE_CHANGE:
            if params is not None and params.new_streak_state is not None:
                changed = await self._store.set_streak_state(
                    user_id, params.new_streak_state, params.streak_ids,
                )
                logger.debug("Changed state on %d streak(s)", changed)
                actions.append("streak_state_changed")

        elif decision.action == DecisionAction.NOTIFICATION:
            if params is not None and params.notification_type:
                subject, content = compose_notification(decision.reasoning, params.notification_tone)
                notification = await self._store.create_notification(
                    Notification(
                        user_id=user_id,
                        ai_decision_id=decision_log_id,
                        type=params.notification_type,
                        subject=subject,
                        content=content,
                    )
                )
                actions.append(f"notification_sent:{notification.id}")

        elif decision.action == DecisionAction.TASK_MODIFICATION:
            if params is not None and params.task_modifications:
                for mod in params.task_modifications:
                    updated = await self._store.set_task_effort(user_id, mod.task_id, mod.new_effort)
                    if not updated:
                        logger.warning("Task %s not found for user %s; skipped", mod.task_id, user_id)
                actions.append("tasks_modified")

        elif decision.action == DecisionAction.NO_ACTION:
            actions.append("no_action_taken")

        return actions
