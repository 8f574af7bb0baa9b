"""
ContentProfiler - Structural profile of one sheet
"""
import logging
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from .config import ProfilerConfig
from .field_profiler import FieldProfiler
from .models import (
    ContentProfile,
    DataType,
    FieldProfile,
    HeaderQuality,
    PatternProfile,
    RowCountCategory,
    StructureProfile,
)
from .values import is_blank

logger = logging.getLogger(__name__)

# Header text emitted by spreadsheet readers for cells with no header
_PLACEHOLDER_HEADER = re.compile(r"^(__EMPTY(_\d+)?|Unnamed: \d+(_level_\d+)?)$")


def is_placeholder_header(header: Any) -> bool:
    if header is None:
        return True
    text = str(header).strip()
    return text == "" or bool(_PLACEHOLDER_HEADER.match(text))


class ContentProfiler:
    """
    Builds a ContentProfile from headers and rows.
    Purely structural: reads shape, types and header signals, never business meaning.
    """

    def __init__(self, config: Optional[ProfilerConfig] = None):
        """
        Initialize ContentProfiler with configuration

        Args:
            config: ProfilerConfig instance (defaults to env-based config)
        """
        self.config = config or ProfilerConfig.from_env()
        self.field_profiler = FieldProfiler(self.config)

    def generate_content_profile(self,
                                 sheet_name: str,
                                 sheet_index: int,
                                 source_file_name: str,
                                 headers: Sequence[Any],
                                 rows: Sequence[Any]) -> ContentProfile:
        """
        Profile one content unit

        Args:
            sheet_name: Sheet or tab name
            sheet_index: Zero-based position of the sheet in its file
            source_file_name: Name of the uploaded file
            headers: Ordered column headers
            rows: Ordered row records mapping header -> raw value

        Returns:
            ContentProfile (never raises; empty input gives a minimal profile)
        """
        header_names = ["" if h is None else str(h) for h in (headers or [])]
        rows = list(rows or [])
        sample = rows[:self.config.sample_size]
        if len(rows) > len(sample):
            logger.info(f"Sampling {len(sample)} of {len(rows)} rows from '{sheet_name}'")

        fields: List[FieldProfile] = []
        null_cells = 0
        for index, header in enumerate(header_names):
            values = [self._cell(row, header) for row in sample]
            null_cells += sum(1 for v in values if is_blank(v))
            fields.append(self.field_profiler.profile(header, index, values))

        total_cells = len(sample) * len(header_names)
        structure = StructureProfile(
            header_quality=self._header_quality(header_names),
            row_count=len(rows),
            column_count=len(header_names),
            sparsity=null_cells / total_cells if total_cells > 0 else 0.0,
        )
        patterns = self._detect_patterns(fields, len(rows))

        profile = ContentProfile(
            content_unit_id=f"{source_file_name}::{sheet_name}::{sheet_index}",
            sheet_name=sheet_name,
            sheet_index=sheet_index,
            source_file_name=source_file_name,
            structure=structure,
            patterns=patterns,
            fields=fields,
        )

        logger.info(f"Profiled {profile.content_unit_id}: {structure.row_count} rows, "
                    f"{structure.column_count} columns, sparsity {structure.sparsity:.2f}, "
                    f"headers {structure.header_quality.value}")
        return profile

    @staticmethod
    def _cell(row: Any, header: str) -> Any:
        if isinstance(row, Mapping):
            return row.get(header)
        return None

    @staticmethod
    def _header_quality(headers: List[str]) -> HeaderQuality:
        if any(is_placeholder_header(h) for h in headers):
            return HeaderQuality.AUTO_GENERATED
        return HeaderQuality.CLEAN

    def _detect_patterns(self, fields: List[FieldProfile], row_count: int) -> PatternProfile:
        """Derive sheet-level patterns from the field profiles"""
        has_entity_identifier = any(
            f.name_signals.contains_id
            or (f.data_type == DataType.INTEGER and f.distribution.is_sequential and f.is_unique)
            for f in fields
        )
        has_currency_columns = sum(
            1 for f in fields
            if f.data_type == DataType.CURRENCY or (f.is_numeric and f.name_signals.contains_amount)
        )
        has_date_column = any(
            f.data_type == DataType.DATE or f.name_signals.contains_date for f in fields
        )
        has_descriptive_labels = any(
            f.data_type == DataType.TEXT
            and 0 < f.distinct_count < self.config.descriptive_label_max_distinct
            and not f.name_signals.contains_id
            and not f.name_signals.contains_name
            for f in fields
        )
        has_percentage_values = any(f.is_percentage or f.name_signals.contains_rate for f in fields)

        if row_count >= self.config.transactional_row_threshold:
            row_count_category = RowCountCategory.TRANSACTIONAL
        else:
            row_count_category = RowCountCategory.REFERENCE

        return PatternProfile(
            has_entity_identifier=has_entity_identifier,
            has_currency_columns=has_currency_columns,
            has_date_column=has_date_column,
            has_descriptive_labels=has_descriptive_labels,
            has_percentage_values=has_percentage_values,
            row_count_category=row_count_category,
        )


def generate_content_profile(sheet_name: str,
                             sheet_index: int,
                             source_file_name: str,
                             headers: Sequence[Any],
                             rows: Sequence[Any],
                             config: Optional[ProfilerConfig] = None) -> ContentProfile:
    """Profile one content unit with a fresh ContentProfiler"""
    return ContentProfiler(config).generate_content_profile(
        sheet_name, sheet_index, source_file_name, headers, rows
    )
