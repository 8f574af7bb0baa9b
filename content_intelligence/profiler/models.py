"""
Data models for ContentProfiler
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class DataType(str, Enum):
    """Structural data type inferred for a column"""
    INTEGER = "integer"
    DECIMAL = "decimal"
    CURRENCY = "currency"
    DATE = "date"
    TEXT = "text"


class HeaderQuality(str, Enum):
    """Whether headers were written by a person or emitted by a reader"""
    CLEAN = "clean"
    AUTO_GENERATED = "auto_generated"


class RowCountCategory(str, Enum):
    """Shape of the row count"""
    REFERENCE = "reference"          # small, roster/rule/goal sized
    TRANSACTIONAL = "transactional"  # hundreds+, event log sized


NUMERIC_TYPES = (DataType.INTEGER, DataType.DECIMAL, DataType.CURRENCY)


@dataclass(frozen=True)
class NameSignals:
    """Concepts detected in a column header"""
    contains_id: bool = False
    contains_name: bool = False
    contains_target: bool = False
    contains_date: bool = False
    contains_rate: bool = False
    contains_amount: bool = False


@dataclass(frozen=True)
class FieldDistribution:
    """Value distribution for a column sample"""
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    is_sequential: bool = False
    categorical_values: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FieldProfile:
    """
    Structural profile of one column

    Attributes:
        field_name: Header text as supplied, never rewritten
        field_index: Zero-based column position
        data_type: Inferred structural type
        name_signals: Concepts detected in the header
        null_rate: Fraction of sampled cells that are blank
        distinct_count: Number of distinct non-blank values
        is_percentage: Values look like rates or percentages
        distribution: Numeric range or low-cardinality text values
    """
    field_name: str
    field_index: int
    data_type: DataType
    name_signals: NameSignals
    null_rate: float = 0.0
    distinct_count: int = 0
    non_null_count: int = 0
    is_percentage: bool = False
    distribution: FieldDistribution = field(default_factory=FieldDistribution)

    @property
    def is_numeric(self) -> bool:
        return self.data_type in NUMERIC_TYPES

    @property
    def is_categorical(self) -> bool:
        """Low-cardinality text column"""
        return self.data_type == DataType.TEXT and 0 < self.distinct_count < 20

    @property
    def is_unique(self) -> bool:
        return self.non_null_count > 1 and self.distinct_count == self.non_null_count


@dataclass(frozen=True)
class StructureProfile:
    """Sheet-level shape"""
    header_quality: HeaderQuality
    row_count: int
    column_count: int
    sparsity: float


@dataclass(frozen=True)
class PatternProfile:
    """Sheet-level structural patterns derived from the field profiles"""
    has_entity_identifier: bool
    has_currency_columns: int
    has_date_column: bool
    has_descriptive_labels: bool
    has_percentage_values: bool
    row_count_category: RowCountCategory


@dataclass(frozen=True)
class ContentProfile:
    """Complete structural profile of one content unit (sheet or tab)"""
    content_unit_id: str
    sheet_name: str
    sheet_index: int
    source_file_name: str
    structure: StructureProfile
    patterns: PatternProfile
    fields: List[FieldProfile]

    def field_named(self, field_name: str) -> Optional[FieldProfile]:
        for field_profile in self.fields:
            if field_profile.field_name == field_name:
                return field_profile
        return None
