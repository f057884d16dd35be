# -*- coding: utf-8 -*-
"""
Debounce для асинхронных вызовов.

Каждый новый вызов отменяет ранее запланированный: выполнится только тот,
после которого ввод "молчал" delay секунд.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger("debounce")


class Debouncer:
    def __init__(self, func: Callable[..., Awaitable[Any]], delay: float = 1.2):
        self.func = func
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def __call__(self, *args, **kwargs) -> asyncio.Task:
        """Планирует вызов, отменяя предыдущий (если он ещё ждёт)."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        return self._task

    async def _run(self, args, kwargs):
        await asyncio.sleep(self.delay)
        await self.func(*args, **kwargs)

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
            logger.debug("⏱️ Отложенный вызов %s отменён", getattr(self.func, "__name__", self.func))

    async def flush(self) -> None:
        """Дожидается запланированного вызова (используется в тестах и при выходе)."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            # Отменили сам отложенный вызов, а не того, кто ждёт
            if not task.cancelled():
                raise
