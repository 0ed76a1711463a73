import pytest

from artifacts.filters import SearchFilters, compose_lookup, compose_search, escape_like
from auth.sessions import Principal
from core.errors import AuthError


def _normalized(sql: str) -> str:
    return " ".join(sql.split())


def test_no_filters_anonymous_has_no_constraints():
    query = compose_search(SearchFilters())
    sql = _normalized(query.sql)

    assert "WHERE" not in sql
    assert "user_favorites" not in sql
    assert "false AS is_favorite" in sql
    assert sql.endswith("ORDER BY a.created_at DESC, a.id DESC")
    assert query.args == ()


def test_bronze_favorites_for_principal():
    query = compose_search(
        SearchFilters(query="bronze", category="all", favorites_only=True),
        Principal(user_id=42, username="alice"),
    )
    sql = _normalized(query.sql)

    assert query.args == (42, "%bronze%")
    assert "LEFT JOIN user_favorites uf ON uf.artifact_id = a.id AND uf.user_id = $1" in sql
    assert (
        "(a.title LIKE $2 ESCAPE '\\' OR a.description LIKE $2 ESCAPE '\\' "
        "OR a.detailed_description LIKE $2 ESCAPE '\\')"
    ) in sql
    assert "AND uf.id IS NOT NULL" in sql
    assert "a.category =" not in sql
    assert "ORDER BY a.created_at DESC" in sql


def test_all_filters_are_anded_in_order():
    query = compose_search(
        SearchFilters(query="ding", category="bronze", dynasty="Shang"),
        Principal(user_id=3, username="bob"),
    )
    sql = _normalized(query.sql)

    assert query.args == (3, "%ding%", "bronze", "Shang")
    assert "a.category = $3 AND a.dynasty = $4" in sql
    assert "uf.id IS NOT NULL" not in sql.split("WHERE", 1)[1]


def test_blank_filters_are_ignored():
    query = compose_search(SearchFilters(query="   ", category="", dynasty=""))
    assert "WHERE" not in query.sql
    assert query.args == ()


def test_category_all_sentinel_is_case_insensitive():
    query = compose_search(SearchFilters(category="ALL"))
    assert query.args == ()


def test_user_values_never_appear_in_sql_text():
    hostile = "'; DROP TABLE users; --"
    query = compose_search(
        SearchFilters(query=hostile, category=hostile, dynasty=hostile),
        Principal(user_id=1, username=hostile),
    )

    assert "DROP TABLE" not in query.sql
    assert query.args[1] == f"%{hostile}%"
    assert query.args[2:] == (hostile, hostile)


def test_like_wildcards_are_escaped():
    assert escape_like("100%_a\\b") == "100\\%\\_a\\\\b"
    query = compose_search(SearchFilters(query="50%"))
    assert query.args == ("%50\\%%",)


def test_favorites_only_requires_principal():
    with pytest.raises(AuthError):
        compose_search(SearchFilters(favorites_only=True))


def test_lookup_scopes_favorite_flag():
    anonymous = compose_lookup(5)
    assert anonymous.args == (5,)
    assert "WHERE a.id = $1" in _normalized(anonymous.sql)

    owned = compose_lookup(5, Principal(user_id=9, username="c"))
    assert owned.args == (9, 5)
    assert "uf.user_id = $1" in owned.sql
    assert "WHERE a.id = $2" in _normalized(owned.sql)
