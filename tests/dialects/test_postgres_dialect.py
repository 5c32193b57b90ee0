from sqlmapper.dialects import PostgresDialect


def test_postgres_dialect_quotes_identifiers():
    dialect = PostgresDialect()
    assert dialect.quote_identifier('table"name') == '"table""name"'
    assert dialect.format_table("public.people") == '"public"."people"'


def test_postgres_dialect_limit_clause():
    dialect = PostgresDialect()
    assert dialect.limit_clause(10, None) == "LIMIT 10"
    assert dialect.limit_clause(None, 5) == "OFFSET 5"
    assert dialect.limit_clause(10, 5) == "LIMIT 10 OFFSET 5"


def test_postgres_dialect_placeholder_and_returning():
    dialect = PostgresDialect()
    assert dialect.parameter_placeholder() == "%s"
    assert dialect.capabilities.supports_returning is True


def test_postgres_insert_helpers():
    dialect = PostgresDialect()
    assert dialect.placeholders(3) == "%s, %s, %s"
    assert dialect.quote_columns(["id", "name"]) == '"id", "name"'
    assert dialect.returning_clause("id") == ' RETURNING "id"'
    assert dialect.returning_clause(None) == ""
