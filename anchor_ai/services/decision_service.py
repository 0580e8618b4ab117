"""DecisionService — gather, decide, log, execute for one user.

Decision processing is serialized per user with an asyncio.Lock, so two
simultaneous requests for the same user never interleave their lockstep
updates.  Different users proceed concurrently.  A user's lock exists only
while some request for that user holds or awaits it.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from anchor_ai.core.context_aggregator import ContextAggregator
from anchor_ai.core.decision_engine import DecisionEngine
from anchor_ai.core.executor import DecisionExecutor
from anchor_ai.core.insights import build_insights
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.decision import Decision, DecisionResult
from anchor_ai.domain.enums import DecisionAction
from anchor_ai.domain.records import DecisionLog
from anchor_ai.store.base import HabitStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessedDecision:
    decision: Decision
    executed: bool
    decision_log_id: str


class DecisionService:
    def __init__(
        self,
        store: HabitStore,
        aggregator: ContextAggregator,
        engine: DecisionEngine,
        executor: DecisionExecutor,
        consistency_days: int = 7,
    ) -> None:
        self._store = store
        self._aggregator = aggregator
        self._engine = engine
        self._executor = executor
        self._consistency_days = consistency_days
        self._user_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _user_lock(self, user_id: str) -> AsyncIterator[None]:
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = self._user_locks[user_id] = asyncio.Lock()
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            # Drop the entry once no request holds or awaits it
            self._lock_users[user_id] -= 1
            if self._lock_users[user_id] == 0:
                del self._lock_users[user_id]
                del self._user_locks[user_id]

    async def process(self, user_id: str) -> ProcessedDecision:
        """Run one full decision cycle for *user_id*.

        Raises:
            ProfileNotFoundError: The user has no profile.
            StoreError: The decision log could not be written.
        """
        async with self._user_lock(user_id):
            context = await self._aggregator.gather(user_id)
            result = await self._engine.make_decision(context)
            log = await self._log(context, result)
            executed = await self._executor.execute(user_id, result.decision, log.id)
            return ProcessedDecision(
                decision=result.decision,
                executed=executed,
                decision_log_id=log.id,
            )

    async def history(
        self,
        user_id: str,
        limit: int = 10,
        decision_type: DecisionAction | None = None,
    ) -> list[DecisionLog]:
        return await self._store.list_decision_logs(user_id, limit=limit, decision_type=decision_type)

    async def insights(self, user_id: str) -> dict:
        context = await self._aggregator.gather(user_id)
        recent = await self._store.list_decision_logs(user_id, limit=1)
        return build_insights(context, recent[0] if recent else None, self._consistency_days)

    async def _log(self, context: UserContext, result: DecisionResult) -> DecisionLog:
        log = await self._store.create_decision_log(
            DecisionLog(
                user_id=context.user_id,
                decision_type=result.decision.action,
                context=context.model_dump(mode="json"),
                decision=result.decision.to_log_dict(),
                prompt_version=self._engine.prompt_version,
                model_used=result.model_identifier,
                execution_time_ms=result.latency_ms,
            )
        )
        logger.debug("Logged decision %s for user %s", log.id, context.user_id)
        return log
