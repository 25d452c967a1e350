"""
Result Flag Assigner.

Flags lab and radiology results once, when an order is fulfilled. Uses the
same classifier as live vitals; the difference is cadence (once, not every
tick) and persistence (the flag is frozen on the result record).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pandas as pd

from ..classification.range_classifier import classify, derive_critical_range
from ..config.session_settings import SessionSettings
from ..data.contracts import Flag, ReferenceRange

logger = logging.getLogger(__name__)

PANEL_RANGE_COLUMNS = ("low", "high", "critical_low", "critical_high")


def assign_flag(value: Optional[float], analyte_range: ReferenceRange) -> Flag:
    """Flag a fulfilled result value against its analyte range."""
    return classify(value, analyte_range)


@dataclass(frozen=True)
class FlaggedResult:
    """A fulfilled result with its flag fixed at fulfilment time."""
    analyte: str
    value: float
    flag: Flag
    reference: ReferenceRange
    unit: Optional[str] = None
    flagged_at: float = 0.0

    @property
    def symbol(self) -> str:
        return self.flag.symbol

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analyte": self.analyte,
            "value": self.value,
            "unit": self.unit,
            "flag": self.flag.value,
            "symbol": self.symbol,
            "reference": self.reference.to_dict(),
            "flagged_at": self.flagged_at,
        }


def fulfil_result(
    analyte: str,
    value: float,
    analyte_range: ReferenceRange,
    unit: Optional[str] = None,
    timestamp: Optional[float] = None,
) -> FlaggedResult:
    """
    Classify a result once and freeze the flag with it.

    Args:
        analyte: Test or analyte name
        value: Result value
        analyte_range: Reference range for the analyte
        unit: Display unit
        timestamp: Fulfilment time (defaults to now)

    Returns:
        Immutable FlaggedResult
    """
    flag = assign_flag(value, analyte_range)
    if flag.is_critical():
        logger.info(f"Critical result: {analyte}={value} ({flag.value})")
    return FlaggedResult(
        analyte=analyte,
        value=value,
        flag=flag,
        reference=analyte_range,
        unit=unit,
        flagged_at=time.time() if timestamp is None else timestamp,
    )


def _bound(row: pd.Series, column: str) -> Optional[float]:
    if column not in row.index:
        return None
    value = row[column]
    if pd.isna(value):
        return None
    return float(value)


def _panel_range(row: pd.Series, margin_fraction: Optional[float]) -> ReferenceRange:
    bounds = [_bound(row, c) for c in PANEL_RANGE_COLUMNS]
    low, high, critical_low, critical_high = bounds
    if margin_fraction is not None and critical_low is None and critical_high is None:
        return derive_critical_range(low, high, margin_fraction=margin_fraction)
    return ReferenceRange(*bounds)


def flag_panel(frame: pd.DataFrame, settings: Optional[SessionSettings] = None) -> pd.DataFrame:
    """
    Flag a panel of results in one pass.

    Expects ``analyte`` and ``value`` columns plus any of ``low``, ``high``,
    ``critical_low``, ``critical_high``. Missing columns or NaN cells mean
    the bound is absent.

    Args:
        frame: Result panel
        settings: When given, rows that list no critical bounds get them
            derived from the normal range with
            ``settings.critical_margin_fraction``

    Returns:
        Copy of ``frame`` with ``flag`` (Flag.value strings) and ``symbol``
        columns added
    """
    if "value" not in frame.columns:
        raise KeyError("Result panel needs a 'value' column")

    margin_fraction = settings.critical_margin_fraction if settings is not None else None

    flags = []
    for _, row in frame.iterrows():
        reference = _panel_range(row, margin_fraction)
        value = row["value"]
        flags.append(assign_flag(None if pd.isna(value) else float(value), reference))

    out = frame.copy()
    out["flag"] = [f.value for f in flags]
    out["symbol"] = [f.symbol for f in flags]
    return out
