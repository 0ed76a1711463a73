"""
Search query composition for the artifacts collection.

Every filter is optional; the ones that are present are ANDed together.
User-supplied values are never spliced into SQL text: each one is appended to
the argument list and referenced by its asyncpg placeholder ($1, $2, ...).
Only fixed column names and operators ever appear in the composed text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from auth.sessions import Principal
from core.errors import AuthError

CATEGORY_ALL = "all"

# Free-text matches if the term is a substring of any of these.
TEXT_SEARCH_FIELDS = ("a.title", "a.description", "a.detailed_description")

ARTIFACT_COLUMNS = """
          a.id, a.title, a.image_path, a.period, a.dynasty, a.location,
          a.description, a.detailed_description, a.material, a.dimensions,
          a.discovery_location, a.collection, a.category, a.created_at, a.updated_at
"""


@dataclass(frozen=True)
class SearchFilters:
    query: str | None = None
    category: str | None = None
    dynasty: str | None = None
    favorites_only: bool = False


@dataclass(frozen=True)
class ComposedQuery:
    sql: str
    args: tuple[Any, ...]


class _Params:
    def __init__(self) -> None:
        self.values: list[Any] = []

    def bind(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def escape_like(term: str) -> str:
    """
    Escape LIKE wildcards so the term matches as a literal substring.
    """
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _favorite_projection(params: _Params, principal: Principal | None) -> tuple[str, str]:
    """
    Return (is_favorite expression, join clause) scoped to the principal.

    Anonymous callers get no join at all and every row reports false.
    """
    if principal is None:
        return "false AS is_favorite", ""
    user_param = params.bind(int(principal.user_id))
    join = f"LEFT JOIN user_favorites uf ON uf.artifact_id = a.id AND uf.user_id = {user_param}"
    return "(uf.id IS NOT NULL) AS is_favorite", join


def _select(flag: str, join: str) -> str:
    return f"""
        SELECT
          {ARTIFACT_COLUMNS.strip()},
          {flag}
        FROM artifacts a
        {join}
    """


def compose_search(filters: SearchFilters, principal: Principal | None = None) -> ComposedQuery:
    """
    Build the artifact search query for the given filters.

    Predicates:
    - query: substring of title, description or detailed_description
    - category: equality, unless empty or "all"
    - dynasty: exact match when non-empty
    - favorites_only: only artifacts the principal has favorited; needs a principal
    Results are always ordered newest first.
    """
    if filters.favorites_only and principal is None:
        raise AuthError("Sign in to list favorites.")

    params = _Params()
    flag, join = _favorite_projection(params, principal)
    conditions: list[str] = []

    term = (filters.query or "").strip()
    if term:
        p = params.bind(f"%{escape_like(term)}%")
        matches = " OR ".join(f"{field} LIKE {p} ESCAPE '\\'" for field in TEXT_SEARCH_FIELDS)
        conditions.append(f"({matches})")

    category = (filters.category or "").strip()
    if category and category.lower() != CATEGORY_ALL:
        conditions.append(f"a.category = {params.bind(category)}")

    dynasty = (filters.dynasty or "").strip()
    if dynasty:
        conditions.append(f"a.dynasty = {params.bind(dynasty)}")

    if filters.favorites_only:
        conditions.append("uf.id IS NOT NULL")

    sql = _select(flag, join)
    if conditions:
        sql += "WHERE " + "\n          AND ".join(conditions) + "\n"
    sql += "        ORDER BY a.created_at DESC, a.id DESC\n"
    return ComposedQuery(sql=sql, args=tuple(params.values))


def compose_lookup(artifact_id: int, principal: Principal | None = None) -> ComposedQuery:
    """
    Build the single-artifact query, favorite flag scoped like search.
    """
    params = _Params()
    flag, join = _favorite_projection(params, principal)
    sql = _select(flag, join) + f"WHERE a.id = {params.bind(int(artifact_id))}\n"
    return ComposedQuery(sql=sql, args=tuple(params.values))
