"""sqlplate 例外クラス."""

from __future__ import annotations

NO_DATA_IS_ACCESSIBLE = "No data is accessible."


class SqlplateError(Exception):
    """sqlplate の基底例外."""


class ConversionError(SqlplateError):
    """値を SQL リテラルに変換できない."""


class SqlRenderError(SqlplateError):
    """SQL テンプレートの展開エラー."""


class MappingError(SqlplateError):
    """マッピングエラー."""


class DataAccessError(SqlplateError):
    """ドライバ層で発生したエラー.

    元の例外は ``cause`` と ``__cause__`` の両方で参照できる。
    """

    def __init__(self, cause: BaseException | str | None = None) -> None:
        if isinstance(cause, BaseException):
            super().__init__(str(cause) or type(cause).__name__)
            self.cause: BaseException | None = cause
        else:
            super().__init__(*(() if cause is None else (cause,)))
            self.cause = None


class EmptyResultDataAccessError(DataAccessError):
    """1行以上を期待したクエリの結果が0行."""

    def __init__(self, message: str = NO_DATA_IS_ACCESSIBLE) -> None:
        super().__init__(message)


class IllegalCallerError(SqlplateError):
    """呼び出し側のコールバックから漏れたドライバ以外のエラー."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause
