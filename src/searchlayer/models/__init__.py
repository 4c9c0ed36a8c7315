"""Parameter and result models."""

from searchlayer.models.params import (
    DeleteByTimeParams,
    ExistsSearchParams,
    FilterItem,
    FilterType,
    MatchSearchParams,
    MultiFieldMode,
    MultiFieldSearchParams,
    RangeItem,
    SearchParams,
    SortDirection,
    SortItem,
    TermSearchParams,
    TermsSearchParams,
)
from searchlayer.models.result import EngineHealth, ResultEnvelope

__all__ = [
    "DeleteByTimeParams",
    "EngineHealth",
    "ExistsSearchParams",
    "FilterItem",
    "FilterType",
    "MatchSearchParams",
    "MultiFieldMode",
    "MultiFieldSearchParams",
    "RangeItem",
    "ResultEnvelope",
    "SearchParams",
    "SortDirection",
    "SortItem",
    "TermSearchParams",
    "TermsSearchParams",
]
