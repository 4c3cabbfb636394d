"""
Batch scanning of many audio items.

Each item is analysed as an independent unit of work on its own worker
thread, bounded by a wall-clock timeout, with a cooperative yield between
items so an event loop driving a UI stays responsive.  A timeout is reported
as its own outcome, never as a 0 Hz detection.  Cancelling a scan is always
safe: analysis mutates no shared state, so the abandoned unit is simply not
awaited any more and its worker is released without being joined.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from harmoniscope.core.spectrum import SampleBlock
from harmoniscope.pipeline import AnalysisResult, FrequencyPipeline

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

OUTCOME_ANALYZED = "analyzed"
OUTCOME_TIMEOUT = "timeout"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


class AnalysisTimeout(TimeoutError):
    """Analysis did not finish within the allotted time."""


@dataclass(frozen=True)
class ScanOutcome:
    """What happened to one item of a scan."""

    item: Any
    status: str
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def analyzed(self) -> bool:
        return self.result is not None


async def _run_bounded(func: Callable[..., Any], *args: Any, timeout: float) -> Any:
    """
    Run ``func(*args)`` on a dedicated worker thread, waiting at most *timeout*.

    The worker is shut down without joining, so an overrunning call neither
    blocks this coroutine nor the event loop's own shutdown; its result is
    discarded once it finishes.
    """
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="harmoniscope-scan")
    try:
        return await asyncio.wait_for(loop.run_in_executor(executor, func, *args), timeout)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


async def analyze_with_timeout(
    pipeline: FrequencyPipeline,
    block: SampleBlock,
    timeout: float = DEFAULT_TIMEOUT,
) -> AnalysisResult:
    """
    Analyse *block* in a worker thread, giving up after *timeout* seconds.

    Raises:
        AnalysisTimeout: If the analysis overruns.  The worker thread is left
            to finish on its own and its result is discarded.
    """
    try:
        return await _run_bounded(pipeline.analyze, block, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise AnalysisTimeout(f"analysis exceeded {timeout:.1f}s") from exc


def _known_result(
    existing: Optional[Mapping[Any, AnalysisResult]],
    item: Any,
) -> Optional[AnalysisResult]:
    """Result already recorded for *item*; unhashable items never match."""
    if not existing:
        return None
    try:
        return existing.get(item)
    except TypeError:
        return None


class LibraryScanner:
    """
    Analyses a sequence of items one after another.

    Items may be SampleBlocks or paths to audio files; anything else needs a
    ``loader`` that turns it into a SampleBlock.
    """

    def __init__(
        self,
        pipeline: Optional[FrequencyPipeline] = None,
        timeout: float = DEFAULT_TIMEOUT,
        loader: Optional[Callable[[Any], SampleBlock]] = None,
    ):
        """
        Initialize the scanner.

        Args:
            pipeline: Pipeline used for every item.
            timeout: Per-item wall-clock limit in seconds.
            loader: Optional callable mapping an item to a SampleBlock.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.pipeline = pipeline or FrequencyPipeline()
        self.timeout = timeout
        self.loader = loader

    def _analyze_item(self, item: Any) -> AnalysisResult:
        if self.loader is not None:
            return self.pipeline.analyze(self.loader(item))
        if isinstance(item, SampleBlock):
            return self.pipeline.analyze(item)
        if isinstance(item, (str, Path)):
            return self.pipeline.process_file(item)
        raise TypeError(f"cannot analyse item of type {type(item).__name__}")

    async def scan_one(self, item: Any) -> ScanOutcome:
        """Analyse a single item under the timeout."""
        try:
            result = await _run_bounded(self._analyze_item, item, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Analysis of %s timed out after %.1fs", item, self.timeout)
            return ScanOutcome(item=item, status=OUTCOME_TIMEOUT)
        except Exception as exc:
            logger.warning("Could not analyze %s: %s", item, exc)
            return ScanOutcome(item=item, status=OUTCOME_FAILED, error=str(exc))
        return ScanOutcome(item=item, status=OUTCOME_ANALYZED, result=result)

    async def scan(
        self,
        items: Iterable[Any],
        existing: Optional[Mapping[Any, AnalysisResult]] = None,
        progress_callback: Optional[Callable[[int, str], None]] = None,
    ) -> list[ScanOutcome]:
        """
        Analyse every item in order.

        Args:
            items: Items to analyse.
            existing: Results already known, keyed by item; those items are
                reported as skipped and keep their result.
            progress_callback: Optional callback(percent, message).

        Returns:
            One ScanOutcome per item, in input order.
        """
        items = list(items)
        total = len(items)
        outcomes = []

        for index, item in enumerate(items):
            known = _known_result(existing, item)
            if known is not None:
                outcome = ScanOutcome(item=item, status=OUTCOME_SKIPPED, result=known)
            else:
                outcome = await self.scan_one(item)
            outcomes.append(outcome)

            if progress_callback:
                progress_callback(round((index + 1) / total * 100), f"{outcome.status}: {item}")
            # Let the event loop breathe between units of work
            await asyncio.sleep(0)

        return outcomes

    def scan_sync(
        self,
        items: Iterable[Any],
        existing: Optional[Mapping[Any, AnalysisResult]] = None,
        progress_callback: Optional[Callable[[int, str], None]] = None,
    ) -> list[ScanOutcome]:
        """Blocking wrapper around :meth:`scan` for callers without an event loop."""
        return asyncio.run(self.scan(items, existing, progress_callback))
