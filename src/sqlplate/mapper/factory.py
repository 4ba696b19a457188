"""create_mapper ファクトリ関数."""

from __future__ import annotations

from dataclasses import is_dataclass
from typing import Any

from sqlplate.mapper.callable import CallableRowMapper
from sqlplate.mapper.protocol import RowMapper


def create_mapper(target: Any) -> RowMapper[Any]:
    """マッパーを生成する.

    Args:
        target: RowMapper インスタンス、dataclass 型、Pydantic モデル型、
            または行辞書を受け取る Callable

    Returns:
        RowMapper プロトコルを満たすマッパー

    Raises:
        TypeError: マッパーを判定できない場合

    """
    if isinstance(target, RowMapper) and not isinstance(target, type):
        return target

    if isinstance(target, type):
        if is_dataclass(target):
            from sqlplate.mapper.dataclass import DataclassRowMapper

            return DataclassRowMapper(target)

        if hasattr(target, "model_validate"):
            from sqlplate.mapper.pydantic import PydanticRowMapper

            return PydanticRowMapper(target)

        msg = (
            f"Cannot create mapper for {target}. "
            f"Use dataclass, Pydantic, or provide a custom mapper."
        )
        raise TypeError(msg)

    if callable(target):
        return CallableRowMapper(target)

    msg = f"Cannot create mapper from {target!r}"
    raise TypeError(msg)
