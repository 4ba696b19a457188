"""sqlplate マッパーパッケージ."""

from sqlplate.mapper.callable import CallableRowMapper
from sqlplate.mapper.column import Column
from sqlplate.mapper.dataclass import DataclassRowMapper
from sqlplate.mapper.factory import create_mapper
from sqlplate.mapper.protocol import RowMapper
from sqlplate.mapper.pydantic import PydanticRowMapper

__all__ = [
    "CallableRowMapper",
    "Column",
    "DataclassRowMapper",
    "PydanticRowMapper",
    "RowMapper",
    "create_mapper",
]
