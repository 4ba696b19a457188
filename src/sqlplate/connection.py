"""接続取得の境界とドライバ例外の判定."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConnectionAcquirer(Protocol):
    """データソースから DB-API 接続を取得するインターフェース.

    プール接続かトランザクションに紐づいた接続かは実装に任せる。
    取得した接続の返却・クローズも実装側の責務であり、
    ``SqlTemplate`` は接続を閉じない。
    """

    def acquire(self, data_source: Any) -> Any:
        """接続を取得する."""
        ...


class DirectConnectionAcquirer:
    """データソースそのものを DB-API 接続として扱う.

    接続のライフサイクルは呼び出し側が管理する。
    """

    def acquire(self, data_source: Any) -> Any:
        """データソースをそのまま返す."""
        return data_source

    def __repr__(self) -> str:
        return "DirectConnectionAcquirer()"


class CallableConnectionAcquirer:
    """``acquire(data_source)`` 相当の関数をラップする."""

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self._func = func

    def acquire(self, data_source: Any) -> Any:
        """関数を呼び出して接続を取得する."""
        return self._func(data_source)


def as_acquirer(acquirer: ConnectionAcquirer | Callable[[Any], Any] | None) -> ConnectionAcquirer:
    """Acquirer 指定を ``ConnectionAcquirer`` に正規化する.

    Raises:
        TypeError: acquire メソッドを持たず、呼び出し可能でもない場合

    """
    if acquirer is None:
        return DirectConnectionAcquirer()
    if isinstance(acquirer, ConnectionAcquirer):
        return acquirer
    if callable(acquirer):
        return CallableConnectionAcquirer(acquirer)
    msg = f"{acquirer!r} is neither a ConnectionAcquirer nor a callable"
    raise TypeError(msg)


def _is_dbapi_module_error(exc: BaseException) -> bool:
    """例外クラスが PEP 249 モジュールの ``Error`` 階層に属するか."""
    for klass in type(exc).__mro__:
        if klass.__name__ != "Error":
            continue
        top_level = klass.__module__.split(".", 1)[0]
        module = sys.modules.get(top_level)
        if module is not None and hasattr(module, "apilevel") and hasattr(module, "DatabaseError"):
            return True
    return False


def is_driver_error(
    exc: BaseException,
    connection: Any = None,
    driver_errors: tuple[type[BaseException], ...] | None = None,
) -> bool:
    """例外がドライバ層のエラーかどうかを判定する.

    判定順:

    1. ``driver_errors`` が指定されていればそのクラスのみで判定する
    2. 接続の ``Error`` 属性（PEP 249 のオプション拡張）
    3. 例外クラスを定義した DB-API モジュールの ``Error`` 階層

    Args:
        exc: 判定対象の例外
        connection: 取得済みの接続（未取得なら None）
        driver_errors: ドライバ例外として扱うクラス

    Returns:
        ドライバ層のエラーなら True

    """
    if driver_errors:
        return isinstance(exc, driver_errors)
    if connection is not None:
        base = getattr(connection, "Error", None)
        if isinstance(base, type) and issubclass(base, BaseException) and isinstance(exc, base):
            return True
    return _is_dbapi_module_error(exc)
