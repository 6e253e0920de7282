import asyncio

from fogscale.objects import ScalableObjectRef
from typing import Awaitable, Callable, Dict, Optional

class ScaleLoopRegistry:
    """
    Keeps at most one running scale loop per scalable object.

    The registry belongs to one event loop and its methods must be called from it.
    `start_loop` and `stop_loop` never await, so a lookup and the following
    insert or delete cannot interleave with another caller.
    """

    def __init__(self):
        self._loops: Dict[ScalableObjectRef, asyncio.Task] = {}

    def __contains__(self, ref: ScalableObjectRef) -> bool:
        return ref in self._loops

    def __len__(self) -> int:
        return len(self._loops)

    def get(self, ref: ScalableObjectRef) -> Optional[asyncio.Task]:
        return self._loops.get(ref)

    def start_loop(self, ref: ScalableObjectRef, runner: Callable[[], Awaitable[None]]) -> asyncio.Task:
        """Starts `runner()` as the loop of `ref`, or returns the loop already running for it."""

        task = self._loops.get(ref)
        if task is not None and not task.done():
            return task

        task = asyncio.get_running_loop().create_task(runner(), name=f"scale-loop:{ref}")
        self._loops[ref] = task
        task.add_done_callback(lambda finished: self._forget(ref, finished))
        return task

    def stop_loop(self, ref: ScalableObjectRef) -> bool:
        """Cancels and forgets the loop of `ref`. Returns False when there was none."""

        task = self._loops.pop(ref, None)
        if task is None:
            return False

        task.cancel()
        return True

    async def stop_all(self) -> None:
        """Cancels every loop and waits for them to finish."""

        tasks = list(self._loops.values())
        self._loops.clear()

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, ref: ScalableObjectRef, finished: asyncio.Task) -> None:
        # A newer loop may already be registered for the same ref.
        if self._loops.get(ref) is finished:
            del self._loops[ref]
