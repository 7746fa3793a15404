import sqlglot


def pretty(sql: str) -> str:
    """Normalized PostgreSQL rendering of a command, or the command itself if sqlglot can't parse it."""
    try:
        return sqlglot.transpile(sql, read="postgres", write="postgres")[0]
    except Exception:
        return sql
