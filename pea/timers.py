import asyncio
import logging

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls `callback` every `interval` seconds on the running event loop until cancelled."""

    def __init__(self, interval, callback, name=None):
        self.interval = interval
        self.callback = callback
        self.name = name or getattr(callback, '__name__', 'timer')
        self._task = None

    @property
    def active(self):
        return self._task is not None and not self._task.done()

    def start(self, loop=None):
        if self.active:
            return
        loop = loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self.name)

    def cancel(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception:
                logger.exception("Timer %s callback failed", self.name)
