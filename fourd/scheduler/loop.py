from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, List, Optional

from ..engine import LayoutEngine

logger = logging.getLogger(__name__)

FrameListener = Callable[[LayoutEngine], Any]


class LayoutLoop:
    def __init__(self, engine: LayoutEngine, fps: float = 60.0) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.engine = engine
        self.interval = 1.0 / float(fps)
        self._listeners: List[FrameListener] = []
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def run_once(self) -> None:
        self.engine.step()
        for listener in list(self._listeners):
            result = listener(self.engine)
            if inspect.isawaitable(result):
                await result

    async def run(self, frames: Optional[int] = None) -> int:
        """Tick until frames have run or stop() is called; returns the ticks done."""
        self._running = True
        done = 0
        try:
            while self._running and (frames is None or done < frames):
                started = time.perf_counter()
                try:
                    await self.run_once()
                except Exception as exc:
                    logger.error(
                        "layout-error",
                        extra={"frame": self.engine.frame, "error": str(exc)},
                    )
                    raise
                done += 1
                elapsed = time.perf_counter() - started
                logger.debug(
                    "layout-cycle",
                    extra={"frame": self.engine.frame, "elapsed": elapsed, "interval": self.interval},
                )
                await asyncio.sleep(max(self.interval - elapsed, 0.0))
        finally:
            self._running = False
        return done

    def stop(self) -> None:
        self._running = False


__all__ = ["LayoutLoop", "FrameListener"]
