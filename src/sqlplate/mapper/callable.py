"""CallableRowMapper: ユーザー提供の関数をラップするマッパー."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class CallableRowMapper(Generic[T]):
    """ユーザー提供の関数をラップするマッパー."""

    def __init__(self, func: Callable[[dict[str, Any]], T]) -> None:
        self._func = func

    def map_row(self, row: dict[str, Any]) -> T:
        """1行を値に変換."""
        return self._func(row)

    def __repr__(self) -> str:
        return f"CallableRowMapper({self._func!r})"
