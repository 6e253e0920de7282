"""
Tests for the scale loop registry.
"""

import asyncio

from fogscale.objects import ScalableObjectRef
from fogscale.scaling.registry import ScaleLoopRegistry


REF = ScalableObjectRef("default", "frontend", "ScaledObject")


async def run_forever(started):
    started.append(True)
    await asyncio.Event().wait()


class TestScaleLoopRegistry:
    """Test ScaleLoopRegistry"""

    def test_refs_are_value_keys(self):
        assert ScalableObjectRef("default", "frontend", "ScaledObject") == REF
        assert ScalableObjectRef("default", "frontend", "ScaledJob") != REF
        assert str(REF) == "ScaledObject/default/frontend"

    def test_start_twice_returns_running_loop(self):
        async def scenario():
            registry = ScaleLoopRegistry()
            started = []

            first = registry.start_loop(REF, lambda: run_forever(started))
            second = registry.start_loop(REF, lambda: run_forever(started))
            await asyncio.sleep(0)

            assert first is second
            assert len(registry) == 1
            await registry.stop_all()
            return started

        assert asyncio.run(scenario()) == [True]

    def test_concurrent_starts_run_one_loop(self):
        async def scenario():
            registry = ScaleLoopRegistry()
            started = []

            async def start():
                await asyncio.sleep(0)
                return registry.start_loop(REF, lambda: run_forever(started))

            tasks = await asyncio.gather(*(start() for _ in range(5)))
            await asyncio.sleep(0)

            assert all(task is tasks[0] for task in tasks)
            await registry.stop_all()
            return started

        assert len(asyncio.run(scenario())) == 1

    def test_stop_cancels_loop(self):
        async def scenario():
            registry = ScaleLoopRegistry()
            task = registry.start_loop(REF, lambda: run_forever([]))
            await asyncio.sleep(0)

            assert registry.stop_loop(REF) is True
            await asyncio.gather(task, return_exceptions=True)
            return task.cancelled(), REF in registry

        assert asyncio.run(scenario()) == (True, False)

    def test_stop_absent_loop_is_noop(self):
        async def scenario():
            registry = ScaleLoopRegistry()
            results = [registry.stop_loop(REF) for _ in range(3)]

            registry.start_loop(REF, lambda: run_forever([]))
            results.append(registry.stop_loop(REF))
            results.append(registry.stop_loop(REF))
            await asyncio.sleep(0)
            return results

        assert asyncio.run(scenario()) == [False, False, False, True, False]

    def test_finished_loop_is_forgotten(self):
        async def scenario():
            registry = ScaleLoopRegistry()

            async def done():
                return None

            task = registry.start_loop(REF, done)
            await task
            await asyncio.sleep(0)
            return REF in registry

        assert asyncio.run(scenario()) is False

    def test_restart_after_stop(self):
        async def scenario():
            registry = ScaleLoopRegistry()
            old = registry.start_loop(REF, lambda: run_forever([]))
            registry.stop_loop(REF)
            new = registry.start_loop(REF, lambda: run_forever([]))

            # The cancelled loop finishing must not drop the new one.
            await asyncio.gather(old, return_exceptions=True)
            await asyncio.sleep(0)

            assert new is not old
            assert registry.get(REF) is new
            await registry.stop_all()
            return new.cancelled()

        assert asyncio.run(scenario()) is True
