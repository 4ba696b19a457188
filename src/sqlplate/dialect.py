"""Dialect enum: RDBMS ごとの SQL 方言定義."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Dialect(Enum):
    """RDBMS ごとの SQL 方言.

    POSTGRESQL と MYSQL は同じプレースホルダ ``%s`` を使用するが、
    リテラルの表現が異なるため別メンバーとして定義する。
    """

    SQLITE = ("sqlite", "?")
    POSTGRESQL = ("postgresql", "%s")
    MYSQL = ("mysql", "%s")
    ORACLE = ("oracle", ":{position}")

    def __init__(self, dialect_id: str, placeholder_fmt: str) -> None:
        self._dialect_id = dialect_id
        self._placeholder_fmt = placeholder_fmt

    @property
    def dialect_id(self) -> str:
        """方言の識別子を返す."""
        return self._dialect_id

    def placeholder(self, position: int) -> str:
        """位置パラメータのプレースホルダ文字列を返す.

        Args:
            position: 1 始まりのパラメータ位置

        Returns:
            ``?``、``%s``、または Oracle の ``:1`` 形式

        """
        return self._placeholder_fmt.format(position=position)

    @property
    def is_format_style(self) -> bool:
        """プレースホルダが ``%s`` 形式か（リテラルの ``%`` を ``%%`` にする必要があるか）."""
        return self._placeholder_fmt == "%s"

    @property
    def backslash_is_escape(self) -> bool:
        """バックスラッシュが文字列リテラル内でエスケープ文字として機能するか.

        MySQL と PostgreSQL ではデフォルトで True。
        """
        match self:
            case Dialect.MYSQL | Dialect.POSTGRESQL:
                return True
            case _:
                return False

    @property
    def supports_boolean_literal(self) -> bool:
        """``TRUE`` / ``FALSE`` リテラルを使えるか.

        Oracle の SQL には BOOLEAN リテラルがないため ``1`` / ``0`` を使う。
        """
        return self is not Dialect.ORACLE


def detect_dialect(connection: Any) -> Dialect | None:
    """Connection オブジェクトのモジュール名から Dialect を推定する.

    Args:
        connection: DB-API 接続、またはそれを包むオブジェクト

    Returns:
        推定した Dialect。判定できない場合は None

    """
    module = type(connection).__module__
    if "sqlite3" in module:
        return Dialect.SQLITE
    if "psycopg" in module:
        return Dialect.POSTGRESQL
    if "pymysql" in module or "MySQLdb" in module:
        return Dialect.MYSQL
    if "oracledb" in module:
        return Dialect.ORACLE
    return None
