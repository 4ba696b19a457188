"""引数値を SQL リテラル文字列に変換する."""

from __future__ import annotations

import datetime
import math
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlplate.dialect import Dialect
from sqlplate.exceptions import ConversionError


@dataclass(frozen=True)
class Raw:
    """変換せずにそのまま埋め込む SQL 断片.

    テーブル名やソート順など、バインドできない断片に使う。
    値は一切エスケープされないため、信頼できない入力を渡してはならない。
    """

    text: str

    def __str__(self) -> str:
        return self.text


def quote_string(value: str, dialect: Dialect | None = None) -> str:
    """文字列をシングルクォートで囲んだリテラルにする.

    Args:
        value: 対象の文字列
        dialect: RDBMS 方言。バックスラッシュの扱いを決める

    Returns:
        クォート済みリテラル

    Raises:
        ConversionError: NUL 文字を含む場合

    Examples:
        >>> quote_string("O'Reilly")
        "'O''Reilly'"

    """
    if "\x00" in value:
        msg = "String literal cannot contain a NUL character"
        raise ConversionError(msg)
    prefix = ""
    if dialect is not None and dialect.backslash_is_escape and "\\" in value:
        value = value.replace("\\", "\\\\")
        # standard_conforming_strings の設定に依存しないよう E'' を使う
        if dialect is Dialect.POSTGRESQL:
            prefix = "E"
    return prefix + "'" + value.replace("'", "''") + "'"


def _bytes_literal(value: bytes, dialect: Dialect | None) -> str:
    hex_text = value.hex().upper()
    match dialect:
        case Dialect.POSTGRESQL:
            return f"E'\\\\x{hex_text}'::bytea"
        case Dialect.ORACLE:
            return f"HEXTORAW('{hex_text}')"
        case _:
            return f"X'{hex_text}'"


def to_sql_literal(value: Any, dialect: Dialect | None = None) -> str:
    """値を SQL リテラル文字列に変換する.

    Args:
        value: 変換対象の値
        dialect: RDBMS 方言（None の場合は ANSI 相当の規則）

    Returns:
        SQL リテラル文字列

    Raises:
        ConversionError: 変換できない型、または NaN などの表現できない値

    Examples:
        >>> to_sql_literal(None)
        'NULL'
        >>> to_sql_literal(42)
        '42'
        >>> to_sql_literal("it's")
        "'it''s'"
        >>> to_sql_literal([1, 2])
        '(1, 2)'

    """
    if value is None:
        return "NULL"
    if isinstance(value, Raw):
        return value.text
    # bool は int のサブクラスなので先に判定する
    if isinstance(value, bool):
        if dialect is not None and not dialect.supports_boolean_literal:
            return "1" if value else "0"
        return "TRUE" if value else "FALSE"
    if isinstance(value, Enum):
        return to_sql_literal(value.value, dialect)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if not math.isfinite(value):
            msg = f"Cannot convert non-finite float to SQL literal: {value!r}"
            raise ConversionError(msg)
        return repr(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            msg = f"Cannot convert non-finite Decimal to SQL literal: {value!r}"
            raise ConversionError(msg)
        return format(value, "f")
    if isinstance(value, str):
        return quote_string(value, dialect)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _bytes_literal(bytes(value), dialect)
    if isinstance(value, datetime.datetime):
        return quote_string(value.isoformat(sep=" "), dialect)
    if isinstance(value, (datetime.date, datetime.time)):
        return quote_string(value.isoformat(), dialect)
    if isinstance(value, uuid.UUID):
        return quote_string(str(value), dialect)
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=repr) if isinstance(value, (set, frozenset)) else value
        if not items:
            return "(NULL)"
        return "(" + ", ".join(to_sql_literal(item, dialect) for item in items) + ")"

    msg = f"Cannot convert {type(value).__name__} to SQL literal: {value!r}"
    raise ConversionError(msg)


class SqlLiteralConverter:
    """方言を固定した ``to_sql_literal`` の呼び出し可能ラッパー."""

    def __init__(self, dialect: Dialect | None = None) -> None:
        self.dialect = dialect

    def __call__(self, value: Any) -> str:
        """値を SQL リテラル文字列に変換する."""
        return to_sql_literal(value, self.dialect)

    def __repr__(self) -> str:
        return f"SqlLiteralConverter(dialect={self.dialect!r})"
