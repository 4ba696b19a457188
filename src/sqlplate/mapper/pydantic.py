"""PydanticRowMapper: Pydantic BaseModel 用のマッパー."""

from __future__ import annotations

from typing import Any


class PydanticRowMapper:
    """Pydantic BaseModel 用のマッパー.

    検証エラーは ``pydantic.ValidationError`` のまま送出され、
    ``SqlTemplate`` では呼び出し側のエラーとして扱われる。
    """

    def __init__(self, model_cls: type) -> None:
        if not hasattr(model_cls, "model_validate"):
            msg = f"{model_cls} is not a Pydantic BaseModel"
            raise TypeError(msg)
        self.model_cls = model_cls

    def map_row(self, row: dict[str, Any]) -> Any:
        """1行をモデルに変換."""
        return self.model_cls.model_validate(row)
