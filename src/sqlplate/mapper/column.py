"""Column アノテーション."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Column:
    """カラム名を指定するアノテーション.

    Examples:
        >>> @dataclass
        ... class User:
        ...     id: Annotated[int, Column("user_id")]

    """

    name: str
