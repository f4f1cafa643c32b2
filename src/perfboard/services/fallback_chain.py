"""
Ordered fallback dispatch.

Each step is a named async strategy returning a FetchResult. The dispatcher
walks the steps in order and returns the first success; failures are logged
and the next step is tried. Adding or removing a fallback is a list edit.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from perfboard.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Tagged success/failure outcome of one fallback step."""

    ok: bool
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult[T]":
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class FallbackStep(Generic[T]):
    """One named strategy in a fallback chain."""

    name: str
    run: Callable[[], Awaitable[FetchResult[T]]]


@dataclass(frozen=True)
class ChainOutcome(Generic[T]):
    """Result of running a chain: the winning step (if any) and every attempt made."""

    value: Optional[T]
    step: Optional[str]
    attempts: list[str]

    @property
    def succeeded(self) -> bool:
        return self.step is not None


async def run_chain(steps: Sequence[FallbackStep[T]], label: str = "fetch") -> ChainOutcome[T]:
    """
    Try `steps` strictly in order, stopping at the first success.

    Exceptions raised by a step count as failures, except ConfigurationError,
    which is re-raised.
    """
    attempts: list[str] = []
    for step in steps:
        attempts.append(step.name)
        try:
            result = await step.run()
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning("%s step %s raised: %s", label, step.name, exc)
            continue

        if result.ok:
            logger.info("%s satisfied by step %s", label, step.name)
            return ChainOutcome(value=result.value, step=step.name, attempts=attempts)
        logger.warning("%s step %s failed: %s", label, step.name, result.reason)

    logger.warning("%s exhausted all %d steps", label, len(attempts))
    return ChainOutcome(value=None, step=None, attempts=attempts)


def non_empty(value: Any, reason: str = "empty result") -> FetchResult:
    """Success when `value` is truthy, failure otherwise."""
    if value:
        return FetchResult.success(value)
    return FetchResult.failure(reason)
