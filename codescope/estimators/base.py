"""
Optional learned estimators

An Estimator maps a feature vector to a score in [0, 1]. Estimators are a
best-effort enhancement: every call goes through an EstimatorGateway that
enforces a timeout and falls back to the deterministic heuristic on any
failure, so analysis results never depend on an estimator being present
or healthy.
"""

from __future__ import annotations

import math
from concurrent.futures import Executor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence, runtime_checkable

from ..errors import EstimatorError
from ..log import get_logger

logger = get_logger('estimators')


@runtime_checkable
class Estimator(Protocol):
    """Capability interface for a learned score."""

    available: bool

    def estimate(self, features: Sequence[float]) -> float:
        ...


class NullEstimator:
    """The absent estimator. Callers use the heuristic directly."""

    available = False

    def estimate(self, features: Sequence[float]) -> float:
        raise EstimatorError("No estimator configured")

    def __repr__(self) -> str:
        return 'NullEstimator()'


class FunctionEstimator:
    """Adapts a plain callable (e.g. a loaded model's predict) to Estimator."""

    available = True

    def __init__(self, fn: Callable[[list[float]], float], name: str | None = None) -> None:
        self._fn = fn
        self.name = name or getattr(fn, '__name__', 'estimator')

    def estimate(self, features: Sequence[float]) -> float:
        # Unconverted so the gateway can reject bools and non-numbers
        return self._fn(list(features))

    def __repr__(self) -> str:
        return f'FunctionEstimator({self.name!r})'


@dataclass(frozen=True)
class Estimators:
    """The optional estimators an engine may consult."""

    similarity: Estimator = field(default_factory=NullEstimator)
    vulnerability: Estimator = field(default_factory=NullEstimator)
    quality: Estimator = field(default_factory=NullEstimator)


@dataclass(frozen=True)
class Estimate:
    value: float
    used_estimator: bool


class EstimatorGateway:
    """Timeout-bounded estimator calls with a mandatory fallback."""

    def __init__(
        self,
        estimator: Estimator,
        timeout: float,
        executor: Executor | None,
        name: str,
    ) -> None:
        self._estimator = estimator
        self._timeout = timeout
        self._executor = executor
        self.name = name

    @property
    def available(self) -> bool:
        return bool(getattr(self._estimator, 'available', False)) and self._executor is not None

    def _call(self, features: Sequence[float]) -> float:
        future = self._executor.submit(self._estimator.estimate, list(features))
        try:
            value = future.result(timeout=self._timeout)
        except FutureTimeout as exc:
            future.cancel()
            raise EstimatorError(f"{self.name} estimator timed out after {self._timeout}s") from exc
        except EstimatorError:
            raise
        except Exception as exc:
            raise EstimatorError(f"{self.name} estimator failed: {exc}") from exc
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EstimatorError(f"{self.name} estimator returned non-numeric {value!r}")
        if not math.isfinite(value) or not 0.0 <= value <= 1.0:
            raise EstimatorError(f"{self.name} estimator returned out-of-range {value!r}")
        return float(value)

    def estimate(self, features: Sequence[float], fallback: float) -> Estimate:
        """Estimator score, or ``fallback`` when unavailable or failing."""
        if not self.available:
            return Estimate(fallback, False)
        try:
            return Estimate(self._call(features), True)
        except EstimatorError as exc:
            logger.warning("%s; using heuristic value %.3f", exc, fallback)
            return Estimate(fallback, False)
