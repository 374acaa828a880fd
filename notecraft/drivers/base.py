"""
Iteration Driver

Shared state machine for the note transforms:

    INIT -> SLICE -> ENUMERATE -> TRANSFORM -> RECONCILE -> ADVANCE -> (SLICE | DONE)

Each feature driver supplies the ENUMERATE/RECONCILE behaviour; this module
owns the cursor bookkeeping, transform retries, the stall guard and the
progress callback. A driver never raises for a failed transform or a stalled
cursor: run() returns a DriverResult whose status says what happened.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal, Optional
import logging
import threading
import time

from notecraft.changelog import DebugLog
from notecraft.chunking.boundaries import split_front_matter
from notecraft.errors import (
    ConfigurationError,
    DriverBusyError,
    ProcessingStalledError,
    TransformFailedError,
)
from notecraft.llm.client import TextTransformer
from notecraft.llm.prompts import DEFAULT_PROMPTS

logger = logging.getLogger(__name__)

MAX_TRANSFORM_ATTEMPTS = 3
MAX_ITERATIONS = 100

DriverStatus = Literal["done", "failed", "stalled"]
ProgressCallback = Callable[[str], None]


class Phase(str, Enum):
    INIT = "init"
    SLICE = "slice"
    ENUMERATE = "enumerate"
    TRANSFORM = "transform"
    RECONCILE = "reconcile"
    ADVANCE = "advance"
    DONE = "done"
    FAILED = "failed"
    STALLED = "stalled"


@dataclass
class DriverResult:
    """Outcome of one driver run over one document."""
    feature: str
    status: DriverStatus
    text: str                 # Full document (front matter included)
    iterations: int = 0
    transform_calls: int = 0
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "done"


def restore_outer_whitespace(source: str, transformed: str) -> str:
    """Give transformed the leading and trailing whitespace of source."""
    if not source.strip():
        return source
    lead = source[:len(source) - len(source.lstrip())]
    trail = source[len(source.rstrip()):]
    return lead + transformed.strip() + trail


def _is_rate_limit(error: Exception) -> bool:
    text = str(error).lower()
    return "rate" in text or "429" in text or "too many requests" in text


class TransformDriver:
    """
    Base class for the four feature drivers.

    Subclasses set `feature` and implement process_single() for a body that
    fits one chunk and process_chunks() for the iterative case. Either may
    call _advance() with the current lossless document body
    (committed output + unprocessed remainder) to report progress.
    """

    feature: str = ""
    default_chunk_size: int = 1000

    def __init__(
        self,
        transformer: TextTransformer,
        *,
        chunk_size: Optional[int] = None,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
        debug_log: Optional[DebugLog] = None,
        max_iterations: int = MAX_ITERATIONS,
        max_attempts: int = MAX_TRANSFORM_ATTEMPTS,
        retry_delay: float = 1.0,
    ):
        self.chunk_size = self.default_chunk_size if chunk_size is None else chunk_size
        if self.chunk_size <= 0:
            raise ConfigurationError(f"{self.feature} chunk size must be positive, got {self.chunk_size}")
        if max_iterations <= 0 or max_attempts <= 0:
            raise ConfigurationError("max_iterations and max_attempts must be positive")

        self.transformer = transformer
        self.system_prompt = system_prompt or DEFAULT_PROMPTS[self.feature]
        self.temperature = temperature
        self.top_p = top_p
        self.on_progress = on_progress
        self.debug_log = debug_log
        self.max_iterations = max_iterations
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

        self.phase = Phase.INIT
        self._lock = threading.Lock()
        self._reset()

    @classmethod
    def from_config(cls, transformer: TextTransformer, config, **kwargs) -> "TransformDriver":
        """Build a driver from a ProcessingConfig."""
        feature = config.feature(cls.feature)
        options = dict(
            chunk_size=feature.chunk_size,
            system_prompt=config.system_prompt(cls.feature),
            temperature=config.temperature,
            top_p=config.top_p,
            max_iterations=config.max_iterations,
            debug_log=DebugLog(config.log_dir) if config.debug else None,
        )
        options.update(cls._feature_options(feature))
        options.update(kwargs)
        return cls(transformer, **options)

    @classmethod
    def _feature_options(cls, feature) -> dict:
        return {}

    @property
    def state(self) -> str:
        return "running" if self._lock.locked() else "idle"

    def _reset(self) -> None:
        self._front = ""
        self._iteration = 0
        self._calls = 0
        self._last_body: Optional[str] = None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, text: str) -> DriverResult:
        """
        Process a whole document.

        Raises:
            DriverBusyError: if this driver is already running
        """
        if not self._lock.acquire(blocking=False):
            raise DriverBusyError(f"{self.feature} is already running")
        try:
            return self._run(text)
        finally:
            self._lock.release()

    def _run(self, text: str) -> DriverResult:
        self._reset()
        self.phase = Phase.INIT
        front, body, start_line = split_front_matter(text)
        self._front = front
        if start_line:
            logger.info(f"Skipping {start_line} front matter lines")

        if not body.strip():
            logger.info(f"Nothing to {self.feature}: document body is empty")
            self.phase = Phase.DONE
            return self._result("done", text)

        start_time = time.time()
        try:
            processed = self.process_body(body)
        except TransformFailedError as e:
            self.phase = Phase.FAILED
            message = f"{self.feature} failed after {e.attempts} attempts: {e}"
            logger.error(message)
            return self._result("failed", self._partial_document(text), message)
        except ProcessingStalledError as e:
            self.phase = Phase.STALLED
            logger.error(f"{self.feature} stalled at offset {e.cursor} (iteration {e.iteration}): {e}")
            return self._result("stalled", self._partial_document(text), f"{self.feature} stopped: {e}")

        self.phase = Phase.DONE
        elapsed = time.time() - start_time
        logger.info(
            f"{self.feature} finished in {elapsed:.1f}s: "
            f"{self._iteration} iterations, {self._calls} transform calls"
        )
        return self._result("done", front + processed)

    def _result(self, status: DriverStatus, text: str, message: str = "") -> DriverResult:
        return DriverResult(
            feature=self.feature,
            status=status,
            text=text,
            iterations=self._iteration,
            transform_calls=self._calls,
            message=message,
        )

    def _partial_document(self, original: str) -> str:
        if self._last_body is None:
            return original
        return self._front + self._last_body

    def process_body(self, body: str) -> str:
        if len(body) <= self.chunk_size:
            return self.process_single(body)
        return self.process_chunks(body)

    def process_single(self, body: str) -> str:
        raise NotImplementedError

    def process_chunks(self, body: str) -> str:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _next_iteration(self, cursor: int = 0) -> None:
        self.phase = Phase.SLICE
        if self._iteration >= self.max_iterations:
            raise ProcessingStalledError(
                f"iteration limit of {self.max_iterations} reached",
                cursor=cursor,
                iteration=self._iteration,
            )
        self._iteration += 1

    def _transform(self, user_text: str, system_prompt: Optional[str] = None) -> str:
        """
        Call the transformer, retrying on exceptions and empty output.

        Raises:
            TransformFailedError: after max_attempts unusable replies
        """
        self.phase = Phase.TRANSFORM
        prompt = system_prompt or self.system_prompt
        last_error = "empty response"

        for attempt in range(1, self.max_attempts + 1):
            self._calls += 1
            try:
                output = self.transformer.transform(
                    prompt,
                    user_text,
                    temperature=self.temperature,
                    top_p=self.top_p,
                )
            except Exception as e:
                last_error = f"{type(e).__name__}: {e}"
                logger.warning(f"Transform attempt {attempt}/{self.max_attempts} failed: {last_error}")
                if _is_rate_limit(e) and attempt < self.max_attempts and self.retry_delay > 0:
                    backoff = self.retry_delay * 2 ** (attempt - 1)
                    logger.warning(f"Rate limited, retry in {backoff:.0f}s")
                    time.sleep(backoff)
                continue

            if output and output.strip():
                self.phase = Phase.RECONCILE
                return output
            last_error = "empty response"
            logger.warning(f"Transform attempt {attempt}/{self.max_attempts} returned empty output")

        raise TransformFailedError(last_error, attempts=self.max_attempts)

    def _check_progress(self, cursor: int, new_cursor: int) -> None:
        if new_cursor <= cursor:
            raise ProcessingStalledError(
                f"cursor did not advance past offset {cursor}",
                cursor=cursor,
                iteration=self._iteration,
            )

    def _advance(self, body: str) -> None:
        """Record the current document body and report it to on_progress."""
        self.phase = Phase.ADVANCE
        self._last_body = body
        if self.on_progress:
            self.on_progress(self._front + body)
