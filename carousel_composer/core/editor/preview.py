"""
Preview Scheduler
================

Debounced, cancelable preview recomposition. Each slide has at most one live
request: scheduling a new one cancels the pending request for the same slide,
and a result whose request was superseded while composing is discarded.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.models.schemas import ComposedDocument

logger = get_logger(__name__)

ComposeCallable = Callable[[], ComposedDocument]
ResultCallback = Callable[[str, ComposedDocument], Union[None, Awaitable[None]]]


class PreviewScheduler:
    """Per-slide debouncer for preview compositions."""

    def __init__(
        self,
        on_result: Optional[ResultCallback] = None,
        debounce_ms: Optional[int] = None,
    ):
        """
        Initialize preview scheduler.

        :param on_result: Called with ``(slide_id, document)`` for each delivered preview
        :param debounce_ms: Quiet period before composing; defaults to settings
        """
        settings = get_settings()
        self.on_result = on_result
        self.debounce = (
            settings.preview_debounce_ms if debounce_ms is None else debounce_ms
        ) / 1000
        self.latest: Dict[str, ComposedDocument] = {}
        self.logger: Any = logger.bind(component="preview_scheduler")
        self._tasks: Dict[str, asyncio.Task] = {}
        self._generations: Dict[str, int] = {}

    @property
    def pending(self) -> Dict[str, asyncio.Task]:
        return {slide_id: task for slide_id, task in self._tasks.items() if not task.done()}

    def schedule(self, slide_id: str, compose: ComposeCallable) -> asyncio.Task:
        """
        Schedule a recomposition for a slide, superseding any earlier request.

        Args:
            slide_id: Slide whose preview is recomputed
            compose: Zero-argument callable producing the document

        Returns:
            Task resolving to the delivered document, or None when superseded
        """
        generation = self._generations.get(slide_id, 0) + 1
        self._generations[slide_id] = generation

        previous = self._tasks.get(slide_id)
        if previous is not None and not previous.done():
            previous.cancel()
            self.logger.debug("Superseded pending preview", slide_id=slide_id)

        task = asyncio.create_task(self._run(slide_id, generation, compose))
        self._tasks[slide_id] = task
        return task

    async def _run(
        self, slide_id: str, generation: int, compose: ComposeCallable
    ) -> Optional[ComposedDocument]:
        try:
            await asyncio.sleep(self.debounce)
            loop = asyncio.get_running_loop()
            document = await loop.run_in_executor(None, compose)
        except asyncio.CancelledError:
            self.logger.debug("Preview request cancelled", slide_id=slide_id, generation=generation)
            return None
        except Exception as e:
            self.logger.error("Preview composition failed", slide_id=slide_id, error=str(e))
            return None

        if self._generations.get(slide_id) != generation:
            self.logger.debug("Discarding stale preview", slide_id=slide_id, generation=generation)
            return None

        self.latest[slide_id] = document
        if self.on_result is not None:
            outcome = self.on_result(slide_id, document)
            if inspect.isawaitable(outcome):
                await outcome
        return document

    def cancel(self, slide_id: str) -> None:
        """Cancel the pending request for a slide; an in-flight result is discarded."""
        self._generations[slide_id] = self._generations.get(slide_id, 0) + 1
        task = self._tasks.pop(slide_id, None)
        if task is not None and not task.done():
            task.cancel()

    def cancel_all(self) -> None:
        for slide_id in list(self._tasks):
            self.cancel(slide_id)

    async def flush(self) -> None:
        """Wait for every scheduled request to finish or be discarded."""
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
