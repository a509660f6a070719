"""Per-category correlation between exposure levels and feedback scores.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (pure computation, no I/O, no providers).
#
# Given every numeric feedback entry for one owner, the engine:
#
#   1. COLLECTS the distinct category labels across all readings
#      (blank labels are ignored).
#   2. PAIRS, per category, the first reading with a level present in
#      each entry with that entry's feedback value.  Entries without a
#      usable reading for the category are left out of that category.
#   3. SKIPS categories with fewer than MIN_DATA_POINTS pairs; no stat
#      is emitted at all, since a correlation over two points says nothing.
#   4. FLAGS zero-variance categories (every level or every feedback value
#      identical) with a fixed "zero variance" stat instead of dividing.
#   5. COMPUTES Pearson r and the significance heuristic, catching any
#      arithmetic fault and recording it on that category's stat.
#
# The significance estimate is a fixed heuristic, NOT a calibrated
# test:
#
#     t = r * sqrt((n - 2) / (1 - r^2))
#     p = 2 * (1 - min(1, |t| / 10))
#
# Stored results use exactly these numbers; do not swap in a real test.
# r is clamped to [-1, 1] since the raw-sums form can overshoot by an
# ulp on perfectly linear data.  For |r| == 1 the ratio is unbounded and
# t is taken as +/- infinity, giving p == 0.
#
# Sums that overflow to inf yield NaN rather than an exception; any
# non-finite r or p is recorded as a NON_FINITE_ERROR fault stat.
#
# Every category is computed independently from its own vectors; output
# ordering follows first appearance and only affects dict iteration.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import structlog

from src.models.analysis import CategoryStat, CorrelationResult, FeedbackEntry

logger = structlog.get_logger(logger_name=__name__)

# ── Constants ─────────────────────────────────────────────────────────
MIN_DATA_POINTS = 3
SIGNIFICANCE_THRESHOLD = 0.05
ZERO_VARIANCE_ERROR = "zero variance"
NON_FINITE_ERROR = "non-finite correlation"

# Divisor that maps |t| onto the [0, 1] range used by the heuristic.
_T_SCALE = 10.0


def collect_categories(entries: Sequence[FeedbackEntry]) -> list[str]:
    """Return the distinct non-blank category labels in first-seen order."""
    seen: dict[str, None] = {}
    for entry in entries:
        for reading in entry.readings:
            if reading.category:
                seen.setdefault(reading.category, None)
    return list(seen)


def paired_vectors(
    entries: Sequence[FeedbackEntry],
    category: str,
) -> tuple[list[float], list[float]]:
    """Build equal-length (exposure levels, feedback values) for *category*.

    An entry qualifies when at least one of its readings matches the
    category and has a level (0 counts).  Only the first such reading per
    entry is used.
    """
    exposures: list[float] = []
    feedback: list[float] = []
    for entry in entries:
        reading = next(
            (
                r for r in entry.readings
                if r.category == category and r.exposure_level is not None
            ),
            None,
        )
        if reading is None:
            continue
        exposures.append(float(reading.exposure_level))
        feedback.append(entry.feedback)
    return exposures, feedback


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson product-moment correlation of two equal-length vectors.

    Uses the raw-sums form
    ``(n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))`` and returns
    0 when the denominator is exactly zero.  Finite results are clamped to
    [-1, 1]; overflowing sums come back as NaN.

    Raises:
        ValueError: If the vectors differ in length, or rounding makes the
            product under the square root negative.
    """
    n = len(x)
    if n != len(y):
        msg = f"Vectors must have equal length, got {n} and {len(y)}"
        raise ValueError(msg)

    sum_x = sum_y = sum_xy = sum_x2 = sum_y2 = 0.0
    for xi, yi in zip(x, y):
        sum_x += xi
        sum_y += yi
        sum_xy += xi * yi
        sum_x2 += xi * xi
        sum_y2 += yi * yi

    numerator = n * sum_xy - sum_x * sum_y
    denominator = math.sqrt((n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y))

    if denominator == 0:
        return 0.0
    r = numerator / denominator
    if math.isnan(r):
        return r
    return max(-1.0, min(1.0, r))


def estimate_significance(r: float, n: int) -> float:
    """Simplified significance estimate for correlation *r* over *n* points.

    ``p = 2 * (1 - min(1, |t| / 10))`` with ``t = r * sqrt((n-2) / (1-r^2))``.
    Lower is stronger; values above 1 are possible for weak correlations.
    """
    remaining = 1.0 - r * r
    if remaining <= 0:
        t = math.copysign(math.inf, r)
    else:
        t = r * math.sqrt((n - 2) / remaining)
    return 2.0 * (1.0 - min(1.0, abs(t) / _T_SCALE))


def analyze_category(exposures: Sequence[float], feedback: Sequence[float]) -> CategoryStat:
    """Compute the stat for one category's paired vectors.

    Never raises: degenerate or numerically broken input is reported
    through the stat's ``error`` field.
    """
    if len(set(exposures)) == 1 or len(set(feedback)) == 1:
        return CategoryStat(
            correlation=0.0,
            significance=0.0,
            significant=False,
            error=ZERO_VARIANCE_ERROR,
        )

    try:
        r = pearson_correlation(exposures, feedback)
        p = estimate_significance(r, len(feedback))
    except (ArithmeticError, ValueError) as exc:
        return CategoryStat(
            correlation=0.0,
            significance=1.0,
            significant=False,
            error=f"{type(exc).__name__}: {exc}",
        )

    if not (math.isfinite(r) and math.isfinite(p)):
        return CategoryStat(
            correlation=0.0,
            significance=1.0,
            significant=False,
            error=NON_FINITE_ERROR,
        )

    return CategoryStat(
        correlation=r,
        significance=p,
        significant=p < SIGNIFICANCE_THRESHOLD,
    )


def compute_correlations(entries: Sequence[FeedbackEntry]) -> dict[str, CategoryStat]:
    """Return a stat for every category with at least MIN_DATA_POINTS pairs."""
    categories = collect_categories(entries)
    correlations: dict[str, CategoryStat] = {}

    for category in categories:
        exposures, feedback = paired_vectors(entries, category)
        if len(feedback) < MIN_DATA_POINTS:
            logger.debug(
                "category_skipped",
                category=category,
                data_points=len(feedback),
                required=MIN_DATA_POINTS,
            )
            continue

        stat = analyze_category(exposures, feedback)
        correlations[category] = stat

        if stat.error and stat.error != ZERO_VARIANCE_ERROR:
            logger.warning("correlation_failed", category=category, error=stat.error)
        else:
            logger.debug(
                "correlation_computed",
                category=category,
                correlation=stat.correlation,
                significance=stat.significance,
                data_points=len(feedback),
            )

    logger.info(
        "correlations_summary",
        total_categories=len(categories),
        correlations_calculated=len(correlations),
    )
    return correlations


class CorrelationEngine:
    """Turns one owner's feedback entries into a CorrelationResult.

    The engine holds no state between calls; ``clock`` only supplies the
    ``analyzed_at`` timestamp and can be replaced in tests.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def analyze(self, owner_id: str, entries: Sequence[FeedbackEntry]) -> CorrelationResult:
        return CorrelationResult(
            owner_id=owner_id,
            data_points=len(entries),
            correlations=compute_correlations(entries),
            analyzed_at=self._clock(),
        )
