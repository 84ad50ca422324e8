"""Bugzilla query builders.

Build HTTPS URLs against Bugzilla's `buglist.cgi`, always asking for CSV
output (`ctype=csv`, last parameter). Only the number of rows matters, so the
queries stay deliberately simple.

- `owner_query()` selects unresolved bugs whose reporter or assignee matches
  an email address. With the default `exact` operator the match is
  case-sensitive, and FreeBSD addresses are case-sensitive too: the value is
  used verbatim.
- `product_query()` selects open bugs that mention a product or port name in
  the product, component, alias or short description; a category/port or a
  bare port name both work.

Values are percent-encoded here; callers pass plain strings.
"""

from __future__ import annotations

from urllib.parse import urlencode

from core.config import DEFAULT_BUGZILLA_URL
from core.domain.models import OwnerMatch, QueryKind, QuerySpec

_PRODUCT_FIELDS: tuple[str, ...] = ("product", "component", "alias", "short_desc")


class BugzillaQueryBuilder:
    """Pure URL construction for one Bugzilla instance."""

    def __init__(self, base_url: str = DEFAULT_BUGZILLA_URL) -> None:
        self._endpoint = base_url.rstrip("/") + "/buglist.cgi"

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _build(self, params: list[tuple[str, str]]) -> str:
        query = urlencode([*params, ("ctype", "csv")])
        return f"{self._endpoint}?{query}"

    def owner_query(self, email: str, match: OwnerMatch = OwnerMatch.EXACT) -> str:
        return self._build(
            [
                ("email1", email),
                ("emailassigned_to1", "1"),
                ("emailreporter1", "1"),
                ("emailtype1", OwnerMatch(match).value),
                ("resolution", "---"),
            ]
        )

    def product_query(self, product: str) -> str:
        # f0/f1 open an OR group (j1=OR) that f7/f8 close; conditions start at f2.
        params: list[tuple[str, str]] = [
            ("bug_status", "__open__"),
            ("f0", "OP"),
            ("f1", "OP"),
            ("j1", "OR"),
        ]
        for index, field in enumerate(_PRODUCT_FIELDS, start=2):
            params.extend(
                [
                    (f"f{index}", field),
                    (f"o{index}", "substring"),
                    (f"v{index}", product),
                ]
            )
        params.extend([("f7", "CP"), ("f8", "CP")])
        return self._build(params)

    def build(self, spec: QuerySpec) -> str | None:
        """URL for `spec`, or None when its kind is not recognized."""

        kind = spec.query_kind()
        if kind is QueryKind.OWNER:
            return self.owner_query(spec.match_value, spec.owner_match)
        if kind is QueryKind.PRODUCT:
            return self.product_query(spec.match_value)
        return None
