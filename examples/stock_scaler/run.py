import asyncio

from fogscale.config import HandlerSettings, load_scalable_objects
from fogscale.scaling import DecisionLogExecutor, ScaleHandler
from pathlib import Path

async def main():
    settings = HandlerSettings.from_env()
    scaled_objects, scaled_jobs = load_scalable_objects(Path(__file__).parent / "objects.yaml")

    handler = ScaleHandler(
        DecisionLogExecutor(log_dir=settings.log_dir),
        global_timeout=settings.global_timeout,
        log_dir=settings.log_dir,
    )
    handler.logger.setLevel(settings.log_level)

    loops = [await handler.handle_scalable_object(obj) for obj in scaled_objects + scaled_jobs]

    try:
        await asyncio.gather(*loops)
    finally:
        await handler.stop()

if __name__ == "__main__":
    asyncio.run(main())
