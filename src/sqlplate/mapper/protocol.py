"""RowMapper プロトコル定義."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class RowMapper(Protocol[T_co]):
    """現在行を値に変換するインターフェース.

    行はカラム名をキーとする辞書で渡される。
    マッパーはカーソルを進めたり戻したりしてはならない。
    """

    def map_row(self, row: dict[str, Any]) -> T_co:
        """1行を値に変換."""
        ...
