"""SqlTemplate: SQL 実行テンプレート."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import closing
from typing import TYPE_CHECKING, Any, TypeVar

from sqlplate.connection import as_acquirer, is_driver_error
from sqlplate.converter import SqlLiteralConverter
from sqlplate.dialect import detect_dialect
from sqlplate.exceptions import DataAccessError, EmptyResultDataAccessError, IllegalCallerError
from sqlplate.mapper.factory import create_mapper
from sqlplate.renderer import RenderedSQL, bind, render

if TYPE_CHECKING:
    from sqlplate.connection import ConnectionAcquirer
    from sqlplate.dialect import Dialect
    from sqlplate.mapper.protocol import RowMapper

logger = logging.getLogger(__name__)

T = TypeVar("T")

Action = Callable[[Any, RenderedSQL], T]


def _row_to_dict(cursor: Any, row: Any) -> dict[str, Any]:
    """行オブジェクトをカラム名→値の辞書にする."""
    if isinstance(row, Mapping):
        return dict(row)
    keys = getattr(row, "keys", None)
    if callable(keys):
        # sqlite3.Row など
        return {key: row[key] for key in keys()}
    description = cursor.description
    if not description:
        msg = "Cursor has no description; cannot map row to dict"
        raise TypeError(msg)
    return dict(zip([column[0] for column in description], row))


def iter_rows(cursor: Any) -> Iterator[dict[str, Any]]:
    """カーソルから1行ずつ取り出す（先読みしない）."""
    while True:
        row = cursor.fetchone()
        if row is None:
            return
        yield _row_to_dict(cursor, row)


class SqlTemplate:
    """SQL の展開・実行・結果マッピング・例外変換をまとめたテンプレート.

    Examples:
        >>> template = SqlTemplate(sqlite3.connect("app.db"))
        >>> names = template.query_for_list(
        ...     "SELECT name FROM users WHERE status = [?]",
        ...     lambda row: row["name"],
        ...     "active",
        ... )
        >>> user = template.query("SELECT * FROM users WHERE id = [?]", User, 1)
        >>> affected = template.update("UPDATE users SET name = [?] WHERE id = [?]", "new", 1)

        バインドパラメータを使う:

        >>> template = SqlTemplate(conn, bind_parameters=True)

        プールから接続を取得する:

        >>> template = SqlTemplate(pool, acquirer=lambda pool: pool.current_connection())

    """

    def __init__(
        self,
        data_source: Any,
        *,
        dialect: Dialect | None = None,
        acquirer: ConnectionAcquirer | Callable[[Any], Any] | None = None,
        converter: Callable[[Any], str] | None = None,
        bind_parameters: bool = False,
        driver_errors: type[BaseException] | tuple[type[BaseException], ...] | None = None,
        auto_commit: bool = False,
    ) -> None:
        """初期化.

        Args:
            data_source: 接続取得の元になるハンドル（既定では DB-API 接続そのもの）
            dialect: RDBMS 方言（None の場合は data_source から自動検出を試みる）
            acquirer: data_source から接続を取得する ConnectionAcquirer または関数
            converter: 値を SQL リテラルに変換する関数（既定は方言に合わせた変換）
            bind_parameters: True の場合、リテラル埋め込みではなくバインドパラメータを使う
            driver_errors: ドライバ例外として扱うクラス（既定は接続とモジュールから判定）
            auto_commit: True の場合、update() 後に接続を commit する

        """
        self._data_source = data_source
        self._dialect = dialect if dialect is not None else detect_dialect(data_source)
        self._acquirer = as_acquirer(acquirer)
        self._converter = converter if converter is not None else SqlLiteralConverter(self._dialect)
        self._bind_parameters = bind_parameters
        if isinstance(driver_errors, type):
            driver_errors = (driver_errors,)
        self._driver_errors = driver_errors
        self._auto_commit = auto_commit

    @property
    def data_source(self) -> Any:
        """接続取得の元になるハンドル."""
        return self._data_source

    @property
    def dialect(self) -> Dialect | None:
        """RDBMS 方言."""
        return self._dialect

    def query(
        self,
        sql_format: str,
        row_mapper: RowMapper[T] | Callable[[dict[str, Any]], T] | type[T],
        *args: Any,
    ) -> T:
        """SELECT を実行し、先頭行のマッピング結果を返す.

        Raises:
            EmptyResultDataAccessError: 結果が0行の場合
            DataAccessError: ドライバ層でエラーが発生した場合
            IllegalCallerError: マッパーがドライバ以外のエラーを送出した場合

        """
        return self.query_for_list(sql_format, row_mapper, *args)[0]

    def query_for_list(
        self,
        sql_format: str,
        row_mapper: RowMapper[T] | Callable[[dict[str, Any]], T] | type[T],
        *args: Any,
    ) -> list[T]:
        """SELECT を実行し、全行のマッピング結果を行順のリストで返す.

        Args:
            sql_format: マーカー（``[?]``、``[?]`` を含まない場合は ``?``）を含む SQL テンプレート
            row_mapper: RowMapper、行辞書を受け取る関数、dataclass 型、または Pydantic モデル型
            *args: マーカーに順に埋め込む値

        Returns:
            1件以上のマッピング結果

        Raises:
            EmptyResultDataAccessError: 結果が0行の場合
            DataAccessError: ドライバ層でエラーが発生した場合
            IllegalCallerError: マッパーがドライバ以外のエラーを送出した場合

        """
        mapper = create_mapper(row_mapper)

        def action(cursor: Any, statement: RenderedSQL) -> list[T]:
            self._run(cursor, statement)
            results = [mapper.map_row(row) for row in iter_rows(cursor)]
            if not results:
                raise EmptyResultDataAccessError
            return results

        return self._execute(sql_format, action, args)

    def update(self, sql_format: str, *args: Any) -> int:
        """INSERT/UPDATE/DELETE/DDL を実行し、ドライバが報告した影響行数を返す.

        Raises:
            DataAccessError: ドライバ層でエラーが発生した場合

        """

        def action(cursor: Any, statement: RenderedSQL) -> int:
            self._run(cursor, statement)
            return cursor.rowcount

        return self._execute(sql_format, action, args, commit=self._auto_commit)

    def _render(self, sql_format: str, args: tuple[Any, ...]) -> RenderedSQL:
        if self._bind_parameters:
            return bind(sql_format, args, dialect=self._dialect)
        return RenderedSQL(sql=render(sql_format, args, converter=self._converter))

    def _run(self, cursor: Any, statement: RenderedSQL) -> None:
        if self._bind_parameters:
            logger.debug("query : %s (%d parameter(s))", statement.sql, len(statement.params))
            cursor.execute(statement.sql, statement.params)
        else:
            logger.debug("query : %s", statement.sql)
            cursor.execute(statement.sql)

    def _execute(
        self,
        sql_format: str,
        action: Action[T],
        args: tuple[Any, ...],
        *,
        commit: bool = False,
    ) -> T:
        """SQL を展開して実行し、例外を変換する.

        展開時のエラー（ConversionError、SqlRenderError）は変換せずに送出する。
        カーソルはどの経路でも1回だけ close される。接続は閉じない。
        """
        statement = self._render(sql_format, args)

        try:
            connection = self._acquirer.acquire(self._data_source)
        except Exception as exc:
            if is_driver_error(exc, None, self._driver_errors):
                logger.exception("Failed to acquire connection: %s", exc)
                raise DataAccessError(exc) from exc
            raise

        try:
            with closing(connection.cursor()) as cursor:
                result = action(cursor, statement)
                if commit:
                    connection.commit()
                return result
        except DataAccessError:
            raise
        except Exception as exc:
            if is_driver_error(exc, connection, self._driver_errors):
                logger.exception("%s", exc)
                raise DataAccessError(exc) from exc
            raise IllegalCallerError(exc) from exc
