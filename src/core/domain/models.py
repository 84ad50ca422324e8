"""Domain models (Pydantic v2).

These models describe *what* a bug-count query is and what it produced, not
*how* it is fetched. Nothing here knows about HTTP, the CLI or Twitter.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class QueryKind(str, Enum):
    """Kinds of Bugzilla query that Buggle knows how to build."""

    OWNER = "owner"
    PRODUCT = "product"


class OwnerMatch(str, Enum):
    """Bugzilla `emailtype1` operator used by owner queries.

    `exact` is case-sensitive on the FreeBSD instance (addresses there are
    case-sensitive too); `substring` is case-insensitive; `casesubstring` is a
    case-sensitive substring match.
    """

    EXACT = "exact"
    SUBSTRING = "substring"
    CASE_SUBSTRING = "casesubstring"


class QuerySpec(BaseModel):
    """A named query, as read from configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Human-readable tag shown in the summary.",
    )
    kind: str = Field(
        ...,
        description="Query kind ('owner' or 'product'); unknown kinds are skipped at run time.",
    )
    match_value: str = Field(
        ...,
        alias="match",
        description="Email address or product/port name, used verbatim (case preserved).",
    )
    owner_match: OwnerMatch = Field(
        default=OwnerMatch.EXACT,
        description="Matching operator for owner queries; ignored for product queries.",
    )

    def query_kind(self) -> QueryKind | None:
        try:
            return QueryKind(self.kind)
        except ValueError:
            return None


class QueryResult(BaseModel):
    """Outcome of one query.

    `count` is None when the request was skipped (dry run), failed, or returned
    a non-success status.
    """

    name: str = Field(..., min_length=1)
    count: int | None = Field(
        default=None,
        ge=0,
        description="Number of CSV data rows (header excluded).",
    )
    url: str | None = Field(default=None, description="Request URL, for diagnostics.")
    error: str | None = Field(default=None, description="Short failure reason, if any.")


class RunFlags(BaseModel):
    """Process-wide switches, read once at startup and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    verbose: bool = True
    dry_run: bool = True
    publish: bool = False
    concurrent: bool = False
