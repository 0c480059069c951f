"""Threshold comparison of collected metrics against baselines."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from uiperf.models.metrics import BaselineEntry, ComparisonResult, MetricKind, MetricSample

PASS_MARK = "✅"
FAIL_MARK = "❌"


def format_number(value: float | int) -> str:
    """Render a number the way it appears in the baseline JSON (500, not 500.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_fixed(value: float) -> str:
    """Two decimal places, rounding ties up (0.125 -> "0.13")."""
    return str(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _exceeded_message(kind: MetricKind, actual: float, expected: float) -> str:
    unit = kind.unit
    message = f"exceeded: {format_fixed(actual)}{unit} > {format_number(expected)}{unit}"
    if kind is MetricKind.LAYOUT_SHIFT:
        message += " (CLS)"
    return message


def compare(key: str, sample: MetricSample, entry: BaselineEntry) -> ComparisonResult | None:
    """Compare a render time, layout shift or memory sample against its budget.

    Returns None when the entry defines no threshold for the sample kind.
    Only failing results carry a message.
    """
    if not sample.kind.is_budget:
        raise ValueError(f"{sample.kind.value} is an audit category, use compare_category()")

    expected = entry.threshold_for(sample.kind)
    if expected is None:
        return None

    failed = sample.value > expected
    return ComparisonResult(
        key=f"{key}_{sample.kind.value}",
        kind=sample.kind,
        actual=sample.value,
        expected=expected,
        outcome="fail" if failed else "pass",
        message=_exceeded_message(sample.kind, sample.value, expected) if failed else "",
    )


def score_from_raw(raw_score: float | None) -> int:
    """Convert a 0..1 Lighthouse score to 0..100, rounding halves up."""
    return math.floor((raw_score or 0) * 100 + 0.5)


def compare_category(
    page_key: str,
    category: str,
    raw_score: float | None,
    expected: int,
) -> ComparisonResult:
    """Compare an audit category score; lower than expected fails."""
    kind = MetricKind(category)
    actual = score_from_raw(raw_score)
    passed = actual >= expected
    mark = PASS_MARK if passed else FAIL_MARK
    return ComparisonResult(
        key=f"{page_key}_{category}",
        kind=kind,
        actual=actual,
        expected=expected,
        outcome="pass" if passed else "fail",
        message=f"{mark} {actual} (Expected: {format_number(expected)})",
    )
