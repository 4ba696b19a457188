"""DataclassRowMapper: dataclass 用の自動マッパー."""

from __future__ import annotations

import re
from dataclasses import MISSING, Field, fields, is_dataclass
from typing import Annotated, Any, ClassVar, get_args, get_origin, get_type_hints

from sqlplate.exceptions import MappingError
from sqlplate.mapper.column import Column

_NAMING_RULES = frozenset({"as_is", "snake_to_camel", "camel_to_snake"})


def snake_to_camel(name: str) -> str:
    """snake_case → camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def camel_to_snake(name: str) -> str:
    """camelCase → snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _has_default(f: Field[Any]) -> bool:
    return f.default is not MISSING or f.default_factory is not MISSING


class DataclassRowMapper:
    """Dataclass 用の自動マッパー.

    フィールドに対応するカラム名は次の順で決まる:

    1. ``Annotated[T, Column("X")]`` の指定
    2. ``naming`` ルールで変換したフィールド名

    カラム名の照合は大文字小文字を区別しない（完全一致を優先）。
    """

    _mapping_cache: ClassVar[dict[tuple[type, str], dict[str, str]]] = {}

    def __init__(self, entity_cls: type, *, naming: str = "as_is") -> None:
        if not is_dataclass(entity_cls):
            msg = f"{entity_cls} is not a dataclass"
            raise TypeError(msg)
        if naming not in _NAMING_RULES:
            msg = f"Invalid naming: {naming!r}. Must be one of {sorted(_NAMING_RULES)}"
            raise ValueError(msg)
        self.entity_cls = entity_cls
        self.naming = naming
        self._columns = self._get_columns(entity_cls, naming)
        self._required = frozenset(
            f.name for f in fields(entity_cls) if f.init and not _has_default(f)
        )

    @classmethod
    def _get_columns(cls, entity_cls: type, naming: str) -> dict[str, str]:
        """キャッシュ付きでフィールド名→カラム名の対応を取得."""
        key = (entity_cls, naming)
        if key not in cls._mapping_cache:
            cls._mapping_cache[key] = cls._resolve_columns(entity_cls, naming)
        return cls._mapping_cache[key]

    @staticmethod
    def _resolve_columns(entity_cls: type, naming: str) -> dict[str, str]:
        """フィールド名→カラム名の対応を構築."""
        hints = get_type_hints(entity_cls, include_extras=True)
        columns: dict[str, str] = {}
        for f in fields(entity_cls):
            if not f.init:
                continue
            hint = hints.get(f.name)
            if hint is not None and get_origin(hint) is Annotated:
                annotated = [arg for arg in get_args(hint)[1:] if isinstance(arg, Column)]
                if annotated:
                    columns[f.name] = annotated[0].name
                    continue
            if naming == "snake_to_camel":
                columns[f.name] = snake_to_camel(f.name)
            elif naming == "camel_to_snake":
                columns[f.name] = camel_to_snake(f.name)
            else:
                columns[f.name] = f.name
        return columns

    def map_row(self, row: dict[str, Any]) -> Any:
        """1行をエンティティに変換.

        Raises:
            MappingError: 必須フィールドに対応するカラムが行にない場合

        """
        folded = {str(key).lower(): value for key, value in row.items()}
        kwargs: dict[str, Any] = {}
        for field_name, column in self._columns.items():
            if column in row:
                kwargs[field_name] = row[column]
            elif column.lower() in folded:
                kwargs[field_name] = folded[column.lower()]
            elif field_name in self._required:
                target = f"{self.entity_cls.__name__}.{field_name}"
                msg = f"Column {column!r} for {target} is not in the row"
                raise MappingError(msg)
        return self.entity_cls(**kwargs)

    def __repr__(self) -> str:
        return f"DataclassRowMapper({self.entity_cls.__name__}, naming={self.naming!r})"
