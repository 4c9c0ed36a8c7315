"""Search parameter models.

Each search entry point takes its own validated parameter model. Required
fields are checked when the model is built, so the query builder never has to
discover missing values halfway through a build.

Models accept both snake_case names and the camelCase aliases used by
JavaScript-style callers (``pageSize``, ``searchField``, ...).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class FilterType(StrEnum):
    """Leaf query types allowed in the conjunctive filter context."""

    TERM = "term"
    TERMS = "terms"
    MATCH_PHRASE_PREFIX = "match_phrase_prefix"
    MATCH = "match"
    MATCH_PHRASE = "match_phrase"
    FUZZY = "fuzzy"
    PREFIX = "prefix"


class MultiFieldMode(StrEnum):
    MULTI_MATCH = "multi_match"
    QUERY_STRING = "query_string"


class _ParamsModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class SortItem(_ParamsModel):
    """One sort key. Earlier items take priority over later ones."""

    field: str = Field(min_length=1, description="Field to sort on")
    dir: SortDirection = Field(
        default=SortDirection.ASC,
        validation_alias=AliasChoices("dir", "direction"),
        description="Sort direction",
    )


class FilterItem(_ParamsModel):
    """One non-scoring filter clause, ANDed with every other filter."""

    field: str = Field(min_length=1, description="Field to filter on")
    type: FilterType = Field(default=FilterType.TERM, description="Filter clause type")
    value: Any = Field(description="Value to match; a list for 'terms'")

    @model_validator(mode="after")
    def _check_value_shape(self) -> FilterItem:
        if self.type is FilterType.TERMS:
            if not isinstance(self.value, list):
                raise ValueError("'terms' filter requires a list value")
        elif isinstance(self.value, list):
            raise ValueError(f"'{self.type.value}' filter requires a scalar value")
        return self


class RangeItem(_ParamsModel):
    """Inclusive range on one field. A missing bound leaves that side open."""

    field: str = Field(min_length=1, description="Field to range over")
    from_: str | int | float | None = Field(default=None, alias="from", description="Lower bound (gte)")
    to: str | int | float | None = Field(default=None, description="Upper bound (lte)")

    @model_validator(mode="after")
    def _check_bounds(self) -> RangeItem:
        if self.from_ is None and self.to is None:
            raise ValueError(f"range on '{self.field}' needs at least one of 'from' or 'to'")
        return self


class SearchParams(_ParamsModel):
    """Parameters shared by every search entry point."""

    index: str = Field(min_length=1, description="Target index")
    fields: list[str] = Field(default_factory=list, description="Fields to include in returned sources")
    page: int | None = Field(default=None, ge=1, description="1-based page number")
    page_size: int | None = Field(default=None, ge=1, alias="pageSize", description="Hits per page")
    sort: list[SortItem] = Field(default_factory=list, description="Sort keys in priority order")
    filter: list[FilterItem] = Field(default_factory=list, description="Conjunctive filters")
    range: list[RangeItem] = Field(default_factory=list, description="Conjunctive inclusive ranges")


class TermSearchParams(SearchParams):
    search_field: str = Field(min_length=1, alias="searchField")
    term: str | int | float | bool


class TermsSearchParams(SearchParams):
    search_field: str = Field(min_length=1, alias="searchField")
    terms: list[str | int | float | bool] = Field(min_length=1)


class MatchSearchParams(SearchParams):
    search_field: str = Field(min_length=1, alias="searchField")
    query: str


class MultiFieldSearchParams(SearchParams):
    """Full-text query over several fields.

    ``mode`` picks between a ``multi_match`` clause and a Lucene-syntax
    ``query_string`` clause. Without ``search_fields`` the engine's default
    field set is searched.
    """

    query: str
    search_fields: list[str] = Field(default_factory=list, alias="searchFields")
    mode: MultiFieldMode = MultiFieldMode.MULTI_MATCH


class ExistsSearchParams(SearchParams):
    search_field: str = Field(min_length=1, alias="searchField")


class DeleteByTimeParams(_ParamsModel):
    """Delete every document whose ``field`` is older than ``seconds`` ago.

    ``format`` is a strftime pattern; it has to produce values that sort the
    same way the engine compares ``field``. ``None`` uses the configured
    default.
    """

    index: str = Field(min_length=1)
    field: str = Field(min_length=1)
    seconds: int = Field(ge=0)
    format: str | None = None
