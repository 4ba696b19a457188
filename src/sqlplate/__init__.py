"""sqlplate: SQL template execution for DB-API connections."""

from sqlplate.connection import ConnectionAcquirer, DirectConnectionAcquirer, is_driver_error
from sqlplate.converter import Raw, SqlLiteralConverter, to_sql_literal
from sqlplate.dialect import Dialect, detect_dialect
from sqlplate.exceptions import (
    ConversionError,
    DataAccessError,
    EmptyResultDataAccessError,
    IllegalCallerError,
    MappingError,
    SqlplateError,
    SqlRenderError,
)
from sqlplate.mapper import (
    CallableRowMapper,
    Column,
    DataclassRowMapper,
    PydanticRowMapper,
    RowMapper,
    create_mapper,
)
from sqlplate.renderer import RenderedSQL, bind, render
from sqlplate.template import SqlTemplate

__all__ = [
    "CallableRowMapper",
    "Column",
    "ConnectionAcquirer",
    "ConversionError",
    "DataAccessError",
    "DataclassRowMapper",
    "Dialect",
    "DirectConnectionAcquirer",
    "EmptyResultDataAccessError",
    "IllegalCallerError",
    "MappingError",
    "PydanticRowMapper",
    "Raw",
    "RenderedSQL",
    "RowMapper",
    "SqlLiteralConverter",
    "SqlRenderError",
    "SqlTemplate",
    "SqlplateError",
    "bind",
    "create_mapper",
    "detect_dialect",
    "is_driver_error",
    "render",
    "to_sql_literal",
]
