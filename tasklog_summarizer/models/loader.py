"""
Lazy, coalesced model loading.

A LazyModel owns one model's load state. The first caller of ``get()``
starts the load in a worker thread; callers arriving while it is in flight
await the same future instead of starting another load.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional


class ModelServiceError(RuntimeError):
    """A model could not be loaded or failed during inference."""


class ModelState(Enum):
    UNINITIALIZED = 'uninitialized'
    LOADING = 'loading'
    READY = 'ready'


class LazyModel:
    """Get-or-load accessor around a blocking loader function."""

    def __init__(self, name: str, loader: Callable[[], Any]):
        self.name = name
        self.logger = logging.getLogger(__name__)
        self._loader = loader
        self._instance: Any = None
        self._state = ModelState.UNINITIALIZED
        self._pending: Optional[asyncio.Future] = None

    @property
    def state(self) -> ModelState:
        return self._state

    async def get(self) -> Any:
        if self._state is ModelState.READY:
            return self._instance

        if self._pending is None:
            self._state = ModelState.LOADING
            self._pending = asyncio.ensure_future(self._load())

        # Shielded so one cancelled waiter does not abort the shared load
        return await asyncio.shield(self._pending)

    async def _load(self) -> Any:
        self.logger.info(f"Loading {self.name}...")
        start_time = time.time()

        try:
            instance = await asyncio.to_thread(self._loader)
        except Exception as e:
            self._state = ModelState.UNINITIALIZED
            self.logger.error(f"Failed to load {self.name}: {e}")
            raise ModelServiceError(f"Failed to load {self.name}: {e}") from e
        finally:
            self._pending = None

        self._instance = instance
        self._state = ModelState.READY
        self.logger.info(f"{self.name} loaded in {time.time() - start_time:.2f}s")
        return instance
