import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs the most recently scheduled callback once no new call arrived for `delay` seconds."""

    def __init__(self, delay: float):
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, callback: Callable[[], Any]):
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def cancel(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, callback: Callable[[], Any]):
        await asyncio.sleep(self.delay)
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}", exc_info=True)
