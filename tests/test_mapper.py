"""RowMapper と各マッパー実装のテスト."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Annotated, Any, get_type_hints
from unittest.mock import patch

import pytest

from sqlplate import (
    CallableRowMapper,
    Column,
    DataclassRowMapper,
    MappingError,
    RowMapper,
    SqlTemplate,
    create_mapper,
)
from sqlplate.mapper.dataclass import camel_to_snake, snake_to_camel


@dataclass
class User:
    """テスト用エンティティ."""

    id: int
    name: str
    status: str | None = None


@dataclass
class AnnotatedUser:
    """Annotated カラム指定付きエンティティ."""

    id: Annotated[int, Column("user_id")]
    name: Annotated[str, Column("user_name")]


@dataclass
class Tagged:
    """init=False フィールドを持つエンティティ."""

    id: int
    tags: list[str] = field(default_factory=list)
    label: str = field(init=False, default="")


class TestRowMapperProtocol:
    """RowMapper Protocol の検証."""

    def test_protocol_is_runtime_checkable(self) -> None:
        class MyMapper:
            def map_row(self, row: dict[str, Any]) -> User:
                return User(id=row["id"], name=row["name"])

        assert isinstance(MyMapper(), RowMapper)

    def test_missing_map_row_not_instance(self) -> None:
        class NotMapper:
            def map(self, row: dict[str, Any]) -> User:
                return User(id=0, name="")

        assert not isinstance(NotMapper(), RowMapper)

    def test_builtin_mappers_satisfy_protocol(self) -> None:
        assert isinstance(CallableRowMapper(dict), RowMapper)
        assert isinstance(DataclassRowMapper(User), RowMapper)


class TestCallableRowMapper:
    """関数ラップ."""

    def test_map_row(self) -> None:
        mapper = CallableRowMapper(lambda row: row.get("name"))
        assert mapper.map_row({"name": "a"}) == "a"


class TestDataclassRowMapper:
    """dataclass への自動マッピング."""

    def test_basic(self) -> None:
        mapper = DataclassRowMapper(User)
        assert mapper.map_row({"id": 1, "name": "Alice"}) == User(id=1, name="Alice")

    def test_case_insensitive(self) -> None:
        mapper = DataclassRowMapper(User)
        assert mapper.map_row({"ID": 1, "NAME": "Alice", "STATUS": "x"}) == User(1, "Alice", "x")

    def test_extra_columns_ignored(self) -> None:
        mapper = DataclassRowMapper(User)
        assert mapper.map_row({"id": 1, "name": "A", "other": 0}) == User(id=1, name="A")

    def test_annotated_column(self) -> None:
        mapper = DataclassRowMapper(AnnotatedUser)
        assert mapper.map_row({"user_id": 2, "user_name": "Bob"}) == AnnotatedUser(id=2, name="Bob")

    def test_snake_to_camel(self) -> None:
        @dataclass
        class Camel:
            user_id: int

        mapper = DataclassRowMapper(Camel, naming="snake_to_camel")
        assert mapper.map_row({"userId": 3}) == Camel(user_id=3)

    def test_missing_required_column_raises(self) -> None:
        mapper = DataclassRowMapper(User)
        with pytest.raises(MappingError, match="name"):
            mapper.map_row({"id": 1})

    def test_init_false_field_skipped(self) -> None:
        mapper = DataclassRowMapper(Tagged)
        assert mapper.map_row({"id": 1, "label": "ignored"}) == Tagged(id=1)

    def test_not_dataclass_raises(self) -> None:
        with pytest.raises(TypeError):
            DataclassRowMapper(dict)

    def test_invalid_naming_raises(self) -> None:
        with pytest.raises(ValueError, match="naming"):
            DataclassRowMapper(User, naming="kebab")


class TestMappingCache:
    """_mapping_cache のキャッシュ動作."""

    def test_cache_populated(self) -> None:
        DataclassRowMapper._mapping_cache.clear()

        @dataclass
        class CachedUser:
            id: int

        DataclassRowMapper(CachedUser)
        assert (CachedUser, "as_is") in DataclassRowMapper._mapping_cache

    def test_cache_reused(self) -> None:
        """同じクラスと命名規則の2回目はキャッシュを使う."""
        DataclassRowMapper._mapping_cache.clear()

        @dataclass
        class CachedUser2:
            id: int

        with patch(
            "sqlplate.mapper.dataclass.get_type_hints", wraps=get_type_hints
        ) as hints:
            mapper1 = DataclassRowMapper(CachedUser2)
            mapper2 = DataclassRowMapper(CachedUser2)
        assert mapper1._columns is mapper2._columns
        hints.assert_called_once()

    def test_cache_keyed_by_naming(self) -> None:
        @dataclass
        class CachedUser3:
            user_id: int

        as_is = DataclassRowMapper(CachedUser3)
        camel = DataclassRowMapper(CachedUser3, naming="snake_to_camel")
        assert as_is._columns == {"user_id": "user_id"}
        assert camel._columns == {"user_id": "userId"}

    def test_repeated_queries_resolve_hints_once(self) -> None:
        """SqlTemplate で同じ dataclass を繰り返し使っても型ヒント解決は1回."""
        DataclassRowMapper._mapping_cache.clear()

        @dataclass
        class Item:
            id: int

        conn = sqlite3.connect(":memory:")
        try:
            template = SqlTemplate(conn)
            with patch(
                "sqlplate.mapper.dataclass.get_type_hints", wraps=get_type_hints
            ) as hints:
                for n in range(3):
                    assert template.query("SELECT [?] AS id", Item, n) == Item(id=n)
            hints.assert_called_once()
        finally:
            conn.close()


class TestNamingHelpers:
    """命名規則変換."""

    def test_snake_to_camel(self) -> None:
        assert snake_to_camel("emp_first_name") == "empFirstName"
        assert snake_to_camel("id") == "id"

    def test_camel_to_snake(self) -> None:
        assert camel_to_snake("empFirstName") == "emp_first_name"


class TestCreateMapper:
    """create_mapper の自動判定."""

    def test_dataclass(self) -> None:
        assert isinstance(create_mapper(User), DataclassRowMapper)

    def test_callable(self) -> None:
        mapper = create_mapper(lambda row: row["id"])
        assert isinstance(mapper, CallableRowMapper)
        assert mapper.map_row({"id": 5}) == 5

    def test_row_mapper_instance_returned_as_is(self) -> None:
        mapper = DataclassRowMapper(User)
        assert create_mapper(mapper) is mapper

    def test_unsupported_class_raises(self) -> None:
        class Plain:
            pass

        with pytest.raises(TypeError, match="Cannot create mapper"):
            create_mapper(Plain)

    def test_non_callable_raises(self) -> None:
        with pytest.raises(TypeError):
            create_mapper(42)
