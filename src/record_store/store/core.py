import typing
from typing import Any, List, Optional, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, RowMapping, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from record_store.config import IN_MEMORY_URL, get_settings
from record_store.exceptions import (
    AmbiguousUpsertTargetError,
    QueryError,
    RecordNotFoundError,
)
from record_store.schema.ddl_generator import (
    generate_create_table_ddl,
    generate_indexes_ddl,
)
from record_store.schema.describe import is_record_type
from record_store.schema.introspector import decompose, describe
from record_store.sql.operations.statements import StatementBuilder
from record_store.store.binding import fill_record, new_record
from record_store.store.locks import ReadWriteLock
from record_store.store.models import ExecResult
from record_store.utils.logging import get_logger

IN_MEMORY = ":memory:"

structured_logger = get_logger(__name__)


def _create_engine(url: URL, echo: bool) -> Engine:
    """Create the engine; every in-memory connection shares one handle."""
    if url.database in (None, "", IN_MEMORY):
        return create_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_engine(url, echo=echo, connect_args={"check_same_thread": False})


class RecordStore:
    """
    Record-to-table store over a single SQLite database.

    Writes (create_table, insert, update, delete, execute) hold the lock
    exclusively; reads (read_one, read_many) share it. Each call is one
    independent statement. ``upsert`` is not atomic: its count, insert and
    update each take the lock separately, so a concurrent writer can change
    the row count in between.

    Example:
        >>> with RecordStore.open(IN_MEMORY) as store:
        ...     store.create_table(TestStruct)
        ...     row_id = store.insert(TestStruct(b="b"))
        ...     record = store.read_one(TestStruct, "db_a = ?", row_id)
    """

    def __init__(self, database_url: Optional[str] = None, *, echo: Optional[bool] = None):
        if database_url is None or echo is None:
            settings = get_settings()
            database_url = database_url or settings.DATABASE_URL
            echo = settings.sql_echo if echo is None else echo

        url = make_url(database_url)
        if url.get_backend_name() != "sqlite":
            raise ValueError(
                f"Record store requires a SQLite database, got backend '{url.get_backend_name()}'"
            )

        self.database = url.database or IN_MEMORY
        self._engine = _create_engine(url, echo)
        self._lock = ReadWriteLock()
        self._builder = StatementBuilder()
        self._logger = structured_logger

        self._logger.info("record_store.opened", database=self.database)

    @classmethod
    def open(cls, filename: str, **kwargs: Any) -> "RecordStore":
        """Open a database file on disk, or ``IN_MEMORY``."""
        if filename == IN_MEMORY:
            return cls(IN_MEMORY_URL, **kwargs)
        return cls(f"sqlite:///{filename}", **kwargs)

    def close(self) -> None:
        """Release all database connections."""
        with self._lock.write_locked():
            self._engine.dispose()
        self._logger.info("record_store.closed", database=self.database)

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Statement execution. Callers hold the lock.

    def _execute_write(self, sql: str, params: Sequence[Any] = ()) -> ExecResult:
        with self._engine.begin() as conn:
            result = conn.exec_driver_sql(sql, tuple(params))
            return ExecResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

    def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[RowMapping]:
        with self._engine.connect() as conn:
            return list(conn.exec_driver_sql(sql, tuple(params)).mappings().all())

    def _fetch_first(self, sql: str, params: Sequence[Any] = ()) -> Optional[RowMapping]:
        with self._engine.connect() as conn:
            return conn.exec_driver_sql(sql, tuple(params)).mappings().first()

    def _fetch_scalar(self, sql: str, params: Sequence[Any] = ()) -> Any:
        with self._engine.connect() as conn:
            return conn.exec_driver_sql(sql, tuple(params)).scalar_one()

    # Public surface

    def execute(self, sql: str, *args: Any) -> ExecResult:
        """Run raw SQL with positional arguments."""
        with self._lock.write_locked():
            return self._execute_write(sql, args)

    def create_table(self, sample: Any) -> None:
        """
        Create the table for a record type, then its indexes.

        Safe to call repeatedly. Stops at the first failing statement;
        statements already run stay applied.

        Args:
            sample: Record instance or record class
        """
        table, fields = decompose(sample)
        create_sql = generate_create_table_ddl(table, fields)
        index_sqls = generate_indexes_ddl(table, fields)

        with self._lock.write_locked():
            self._execute_write(create_sql)
            for index_sql in index_sqls:
                self._execute_write(index_sql)

        self._logger.info(
            "record_store.table.created",
            table=table,
            column_count=len(fields),
            index_count=len(index_sqls),
        )

    def insert(self, record: Any) -> int:
        """
        Insert a record. ``create_table`` must have run for its type.

        Returns:
            Row id generated by the database
        """
        table, fields = decompose(record)
        sql, params = self._builder.insert(table, fields)

        with self._lock.write_locked():
            result = self._execute_write(sql, params)

        self._logger.debug("record_store.row.inserted", table=table, row_id=result.lastrowid)
        return result.lastrowid

    def read_one(self, target: Any, where: str = "", *args: Any) -> Any:
        """
        Read a single record selected by ``where``.

        Args:
            target: Record class for a new record, or an instance to fill in place
            where: WHERE fragment, with ``?`` for each argument
            *args: Bind arguments for the fragment

        Returns:
            The populated record; a frozen instance target yields a populated copy

        Raises:
            RecordNotFoundError: If no row matches
            QueryError: If the database rejects the query
        """
        schema = describe(target)
        table, fields = decompose(target)
        sql = self._builder.select(table, fields, where)

        with self._lock.read_locked():
            try:
                row = self._fetch_first(sql, args)
            except SQLAlchemyError as e:
                raise QueryError(f"get {table} failed: {e}", table, where, args) from e

        if row is None:
            raise RecordNotFoundError(table, where, args)

        if is_record_type(type(target)):
            return fill_record(target, schema, row)
        return new_record(schema.record_type, schema, row)

    def read_many(self, target: Any, where: str = "", *args: Any) -> List[Any]:
        """
        Read every record selected by ``where``.

        The fragment is appended verbatim, so it may carry ORDER BY, LIMIT
        and OFFSET clauses. Without ORDER BY no order is guaranteed.

        Args:
            target: Record class, ``list[Record]``, or a non-empty list that is
                extended in place
            where: WHERE fragment, empty for all rows
            *args: Bind arguments for the fragment

        Returns:
            The records read (the extended list when one was passed)

        Raises:
            QueryError: If the database rejects the query
        """
        schema = describe(target)
        table, fields = decompose(target)
        sql = self._builder.select(table, fields, where)

        with self._lock.read_locked():
            try:
                rows = self._fetch_all(sql, args)
            except SQLAlchemyError as e:
                raise QueryError(f"select {table} failed: {e}", table, where, args) from e

        records = [new_record(schema.record_type, schema, row) for row in rows]
        self._logger.debug("record_store.rows.read", table=table, row_count=len(records))

        if isinstance(target, list) and typing.get_origin(target) is None:
            target.extend(records)
            return target
        return records

    def update(self, record: Any, where: str = "", *args: Any) -> int:
        """
        Update the row identified by the record's PRIMARY KEY or UNIQUE field.

        Args:
            record: Record carrying the new values and its key
            where: Optional extra fragment narrowing the target row
            *args: Bind arguments for the fragment

        Returns:
            Number of rows updated

        Raises:
            MissingKeyColumnError: If the record type has no key column
        """
        table, fields = decompose(record)
        sql, params = self._builder.update(table, fields, where, args)

        with self._lock.write_locked():
            result = self._execute_write(sql, params)

        self._logger.debug("record_store.rows.updated", table=table, row_count=result.rowcount)
        return result.rowcount

    def upsert(self, record: Any, where: str, *args: Any) -> Optional[int]:
        """
        Update the row matched by ``where``, or insert the record if none is.

        Returns:
            The generated row id on insert, None on update

        Raises:
            AmbiguousUpsertTargetError: If ``where`` matches several rows
            QueryError: If the count query is rejected
        """
        table = describe(record).table_name
        count_sql = self._builder.count(table, where)

        with self._lock.read_locked():
            try:
                count = self._fetch_scalar(count_sql, args)
            except SQLAlchemyError as e:
                raise QueryError(f"count {table} failed: {e}", table, where, args) from e

        if count == 0:
            row_id = self.insert(record)
            self._logger.debug("record_store.upsert.inserted", table=table, row_id=row_id)
            return row_id
        if count == 1:
            self.update(record, where, *args)
            self._logger.debug("record_store.upsert.updated", table=table)
            return None

        self._logger.warning("record_store.upsert.ambiguous", table=table, row_count=count)
        raise AmbiguousUpsertTargetError(table, where, count)

    def delete(self, sample: Any, where: str, *args: Any) -> int:
        """Delete rows of the sample's table matching ``where``."""
        return self.delete_from(describe(sample).table_name, where, *args)

    def delete_from(self, table: str, where: str, *args: Any) -> int:
        """
        Delete rows of ``table`` matching ``where``.

        Returns:
            Number of rows deleted

        Raises:
            QueryError: If the database rejects the statement
        """
        sql = self._builder.delete(table, where)

        with self._lock.write_locked():
            try:
                result = self._execute_write(sql, args)
            except SQLAlchemyError as e:
                raise QueryError(f"delete from {table} failed: {e}", table, where, args) from e

        self._logger.debug("record_store.rows.deleted", table=table, row_count=result.rowcount)
        return result.rowcount
