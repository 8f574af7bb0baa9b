"""
Per-column structural type inference
"""
import logging
from typing import Any, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import ProfilerConfig
from .models import DataType, FieldDistribution, FieldProfile, NameSignals
from .names import detect_name_signals
from .values import (
    date_value_mask,
    has_cents_precision,
    has_currency_symbol,
    is_blank,
    is_percentage_string,
    is_whole_number,
    parse_number,
    parse_percentage,
)

logger = logging.getLogger(__name__)


class FieldProfiler:
    """Infers a column's data type, header signals and value distribution"""

    def __init__(self, config: ProfilerConfig):
        """
        Initialize field profiler

        Args:
            config: ProfilerConfig instance
        """
        self.config = config

    def profile(self, field_name: str, field_index: int, values: Sequence[Any]) -> FieldProfile:
        """
        Profile one column from its sampled cells

        Args:
            field_name: Header text
            field_index: Zero-based column position
            values: Sampled cells in row order, blanks included

        Returns:
            FieldProfile for the column
        """
        series = pd.Series(list(values), dtype=object)
        non_null = [v for v in series if not is_blank(v)]
        total = len(series)

        null_rate = (total - len(non_null)) / total if total > 0 else 0.0
        distinct_count = int(pd.Series([str(v).strip() for v in non_null], dtype=object).nunique())

        name_signals = detect_name_signals(field_name)
        data_type, is_percentage, numbers = self._infer_type(non_null, name_signals)
        distribution = self._build_distribution(data_type, numbers, non_null, distinct_count)

        logger.debug(f"Profiled field '{field_name}': {data_type.value} "
                     f"(null_rate={null_rate:.2f}, distinct={distinct_count})")

        return FieldProfile(
            field_name=field_name,
            field_index=field_index,
            data_type=data_type,
            name_signals=name_signals,
            null_rate=null_rate,
            distinct_count=distinct_count,
            non_null_count=len(non_null),
            is_percentage=is_percentage,
            distribution=distribution,
        )

    def _agrees(self, count: int, total: int) -> bool:
        return total > 0 and count >= total * self.config.type_consensus_ratio - 1e-9

    def _infer_type(self, non_null: List[Any],
                    name_signals: NameSignals) -> Tuple[DataType, bool, List[float]]:
        """
        Infer the structural type of the non-blank values

        Returns:
            Tuple of (data type, percentage-shaped flag, parsed numbers)
        """
        total = len(non_null)
        if total == 0:
            return DataType.TEXT, False, []

        if self._agrees(int(date_value_mask(non_null).sum()), total):
            return DataType.DATE, False, []

        numbers: List[float] = []
        percent_strings = 0
        whole = 0
        symbols = 0
        cents = 0
        for value in non_null:
            if is_percentage_string(value):
                parsed = parse_percentage(value)
                if parsed is not None:
                    numbers.append(parsed)
                    percent_strings += 1
                continue
            number = parse_number(value)
            if number is None:
                continue
            numbers.append(number)
            if is_whole_number(value, number):
                whole += 1
            if has_currency_symbol(value):
                symbols += 1
            if has_cents_precision(value):
                cents += 1

        if not self._agrees(len(numbers), total):
            return DataType.TEXT, False, []

        plain_numbers = len(numbers) - percent_strings
        in_unit_range = (
            len(numbers) > 1 and whole < plain_numbers and all(0.0 <= n <= 1.0 for n in numbers)
        )
        is_percentage = (
            percent_strings > 0 and percent_strings >= plain_numbers
        ) or name_signals.contains_rate or in_unit_range

        if symbols > 0 and not is_percentage:
            return DataType.CURRENCY, False, numbers
        if percent_strings == 0 and whole == plain_numbers:
            return DataType.INTEGER, is_percentage, numbers
        if is_percentage:
            return DataType.DECIMAL, True, numbers

        magnitude = max(abs(n) for n in numbers)
        cents_shaped = (
            plain_numbers > 0
            and cents / plain_numbers > self.config.currency_two_decimal_ratio
            and magnitude > self.config.currency_min_magnitude
        )
        if name_signals.contains_amount or cents_shaped:
            return DataType.CURRENCY, False, numbers
        return DataType.DECIMAL, False, numbers

    def _build_distribution(self, data_type: DataType, numbers: List[float],
                            non_null: List[Any], distinct_count: int) -> FieldDistribution:
        """Numeric range for numeric columns, value list for low-cardinality text"""
        if numbers and data_type in (DataType.INTEGER, DataType.DECIMAL, DataType.CURRENCY):
            is_sequential = False
            if data_type == DataType.INTEGER:
                ordered = np.unique(np.array(numbers, dtype=float))
                is_sequential = bool(len(ordered) > 1 and np.all(np.diff(ordered) == 1.0))
            return FieldDistribution(
                min=float(min(numbers)),
                max=float(max(numbers)),
                mean=float(np.mean(numbers)),
                is_sequential=is_sequential,
            )

        if data_type == DataType.TEXT and 0 < distinct_count <= self.config.categorical_values_limit:
            labels = pd.unique(pd.Series([str(v).strip() for v in non_null], dtype=object))
            return FieldDistribution(categorical_values=[str(label) for label in labels])

        return FieldDistribution()
