import asyncio
import logging
import time

from .errors import (
    GenerationTimeoutError,
    RefinementFailedError,
    SchemaViolationError,
    TransportError,
    ValidationError,
)
from .interfaces import ResumeOptimizer
from .models import OptimizedResume, ResumeData
from .preconditions import validate_preconditions
from .response_validator import parse_response, validate_response

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (TransportError, GenerationTimeoutError, SchemaViolationError)


class GenerationClient:
    """Calls a ResumeOptimizer with a deadline, retries and response checks.

    Attempts run one after another. Between attempts the client waits
    `attempt ** 2` seconds; once `max_attempts` is spent the last failure is
    wrapped in RefinementFailedError.
    """

    def __init__(self, optimizer: ResumeOptimizer, timeout_seconds: float = 60.0, max_attempts: int = 3, sleep=asyncio.sleep):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.optimizer = optimizer
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, optimizer, settings, **kwargs) -> "GenerationClient":
        return cls(
            optimizer,
            timeout_seconds=settings.timeout_seconds,
            max_attempts=settings.max_attempts,
            **kwargs,
        )

    async def _attempt(self, data: ResumeData) -> OptimizedResume:
        try:
            raw = await asyncio.wait_for(self.optimizer.optimize(data), timeout=self.timeout_seconds)
        except (ValidationError,) + RETRYABLE_ERRORS:
            raise
        except asyncio.TimeoutError as exc:
            raise GenerationTimeoutError(self.timeout_seconds) from exc
        except Exception as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc
        return validate_response(data, parse_response(raw))

    async def refine(self, data: ResumeData) -> OptimizedResume:
        for attempt in range(1, self.max_attempts + 1):
            validate_preconditions(data)
            start = time.monotonic()
            try:
                response = await self._attempt(data)
            except RETRYABLE_ERRORS as exc:
                if attempt >= self.max_attempts:
                    logger.error("optimize attempt %d/%d failed, giving up: %s", attempt, self.max_attempts, exc)
                    raise RefinementFailedError(
                        attempt, exc, overloaded=getattr(exc, "overloaded", False)
                    ) from exc
                delay = attempt ** 2
                logger.warning(
                    "optimize attempt %d/%d failed (%s), retrying in %ds: %s",
                    attempt, self.max_attempts, type(exc).__name__, delay, exc,
                )
                await self._sleep(delay)
                continue
            logger.info("optimize attempt %d succeeded in %.1fs", attempt, time.monotonic() - start)
            return response
