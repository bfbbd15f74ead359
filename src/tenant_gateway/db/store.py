"""
tenant_gateway.db.store

Store handles bound into the request context.

Responsibilities:
- Define the capabilities a store handle can offer (`Store`, `Closeable`, `Explainable`).
- Provide the process-wide pooled store (`PooledStore`).
- Provide the per-request query-plan decorator (`ExplainStore`).
"""

from __future__ import annotations

from typing import Protocol, TextIO

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import ORMExecuteState

from tenant_gateway.db.session import create_engine, create_sessionmaker
from tenant_gateway.settings import Settings


class Store(Protocol):
    def session(self) -> AsyncSession: ...


class Closeable(Protocol):
    async def close(self) -> None: ...


class Explainable(Protocol):
    def explain(self, sink: TextIO, filter: str = "") -> Store: ...


class ExplainableStore(Store, Explainable, Closeable, Protocol):
    """
    What the request middleware needs from the process store.
    """


class PooledStore:
    """
    Long-lived store backed by the engine's connection pool.

    Safe for concurrent use: every `session()` call opens an independent session.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._sessions: async_sessionmaker[AsyncSession] = create_sessionmaker(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> PooledStore:
        return cls(create_engine(settings))

    def session(self) -> AsyncSession:
        return self._sessions()

    def explain(self, sink: TextIO, filter: str = "") -> ExplainStore:
        return ExplainStore(self, sink, filter)

    async def close(self) -> None:
        # Dispose the engine to close pools/FDs gracefully.
        await self.engine.dispose()


class ExplainStore:
    """
    Decorator that writes the query plan of every SELECT to `sink` before running it.

    Only statements containing `filter` are explained; an empty filter explains
    everything. Listeners are attached to the sessions this handle opens, never
    to the shared engine, so other requests are unaffected.
    """

    def __init__(self, inner: Store, sink: TextIO, filter: str = "") -> None:
        self._inner = inner
        self._sink = sink
        self._filter = filter

    def session(self) -> AsyncSession:
        session = self._inner.session()
        event.listen(session.sync_session, "do_orm_execute", self._explain)
        return session

    def _explain(self, state: ORMExecuteState) -> None:
        if not state.is_select:
            return

        conn = state.session.connection()
        compiled = state.statement.compile(
            dialect=conn.dialect, compile_kwargs={"render_postcompile": True}
        )
        sql = str(compiled)
        if self._filter and self._filter not in sql:
            return

        params = compiled.construct_params(state.parameters)
        if compiled.positional:
            args = tuple(params[name] for name in compiled.positiontup or ())
        else:
            args = params

        prefix = "EXPLAIN QUERY PLAN " if conn.dialect.name == "sqlite" else "EXPLAIN "
        rows = conn.exec_driver_sql(prefix + sql, args).fetchall()

        self._sink.write(f"{sql}\n")
        for row in rows:
            self._sink.write("\t" + " | ".join(str(col) for col in row) + "\n")
        self._sink.flush()


# --- Module Notes -----------------------------------------------------------
# Capabilities are expressed as Protocols so the middleware depends on what a
# handle can do (open sessions, explain, close) rather than on concrete types.
