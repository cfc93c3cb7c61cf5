"""Query engine adapters."""
from pycqlsh.engines.base import QueryEngine

__all__ = ["QueryEngine", "create_engine"]


def create_engine(kind: str, **options) -> QueryEngine:
    """Build and connect an engine by name ('cassandra' or 'duckdb')."""
    kind = (kind or "cassandra").lower()
    if kind == "duckdb":
        from pycqlsh.engines.duckdb_engine import DuckDBEngine
        engine: QueryEngine = DuckDBEngine(database=options.get("database") or ":memory:")
    elif kind == "cassandra":
        from pycqlsh.engines.cassandra_engine import CassandraEngine
        engine = CassandraEngine(
            host=options.get("host") or "localhost",
            port=int(options.get("port") or 9042),
            username=options.get("username"),
            password=options.get("password"),
            keyspace=options.get("keyspace"),
            local_dc=options.get("local_dc"),
            connect_timeout=float(options.get("connect_timeout") or 5),
            request_timeout=float(options.get("request_timeout") or 10),
        )
    else:
        raise ValueError(f"Unknown engine: {kind}")
    engine.connect()
    if kind == "duckdb" and options.get("keyspace"):
        engine.use_keyspace(options["keyspace"])
    return engine
