"""SQL テンプレートの展開.

テンプレート中の位置マーカーを、引数の順に左から1つずつ置き換える。
マーカーはテンプレートごとに1種類で、``[?]`` を含むテンプレートでは ``[?]``、
含まないテンプレートでは ``?`` がマーカーになる。置き換え方は2通りある:

- ``render``: 引数を SQL リテラル文字列に変換して直接埋め込む（互換モード）。
  文字列はエスケープされるが、``Raw`` やカスタム変換関数を通した値は
  そのまま SQL になるため SQL インジェクションの余地が残る。
- ``bind``: マーカーをドライバのプレースホルダに置き換え、引数は
  バインドパラメータとして渡す。``Raw`` の値だけはそのまま SQL に埋め込む。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlplate.converter import Raw, to_sql_literal
from sqlplate.exceptions import SqlRenderError

if TYPE_CHECKING:
    from sqlplate.dialect import Dialect

logger = logging.getLogger(__name__)

BRACKETED_MARKER = re.compile(r"\[\?\]")
BARE_MARKER = re.compile(r"\?")


def marker_pattern(sql_format: str) -> re.Pattern[str]:
    """テンプレートのマーカーを返す.

    ``[?]`` を1つでも含むテンプレートでは ``[?]`` だけがマーカーになり、
    文字列定数や演算子の ``?`` はそのまま残る。含まない場合は ``?`` がマーカー。
    """
    return BRACKETED_MARKER if BRACKETED_MARKER.search(sql_format) else BARE_MARKER


@dataclass(frozen=True)
class RenderedSQL:
    """展開結果."""

    sql: str
    params: tuple[Any, ...] = ()
    """バインドパラメータ（``render`` では常に空）."""


def count_markers(sql_format: str) -> int:
    """テンプレート中のマーカー数を返す."""
    return len(marker_pattern(sql_format).findall(sql_format))


def render(
    sql_format: str,
    args: Sequence[Any] | None = None,
    *,
    converter: Callable[[Any], str] = to_sql_literal,
) -> str:
    """マーカーを引数の SQL リテラルで置き換える.

    引数ごとに、直前の置き換え位置より後ろで最初に現れるマーカーを
    ``converter(arg)`` の結果で置き換える。埋め込んだテキスト自体が
    再走査されることはない。

    - 引数がマーカーより多い場合、余った引数は使われない。
    - マーカーが引数より多い場合、余ったマーカーはそのまま残る。

    Args:
        sql_format: SQL テンプレート
        args: 引数のシーケンス（None または空ならテンプレートをそのまま返す）
        converter: 値を SQL リテラルに変換する関数

    Returns:
        展開後の SQL

    Raises:
        ConversionError: converter が値を変換できない場合

    Examples:
        >>> render("SELECT * FROM t WHERE id = [?]", [42])
        'SELECT * FROM t WHERE id = 42'

    """
    if not args:
        return sql_format

    pattern = marker_pattern(sql_format)
    pieces: list[str] = []
    pos = 0
    consumed = 0
    for arg in args:
        match = pattern.search(sql_format, pos)
        if match is None:
            break
        pieces.append(sql_format[pos : match.start()])
        pieces.append(converter(arg))
        pos = match.end()
        consumed += 1
    pieces.append(sql_format[pos:])

    if consumed < len(args):
        logger.warning(
            "%d argument(s) left unused: template has only %d marker(s)",
            len(args) - consumed,
            consumed,
        )
    else:
        leftover = len(pattern.findall(sql_format, pos))
        if leftover:
            logger.warning(
                "%d marker(s) left unsubstituted after %d argument(s)",
                leftover,
                consumed,
            )
    return "".join(pieces)


def bind(
    sql_format: str,
    args: Sequence[Any] | None = None,
    *,
    dialect: Dialect | None = None,
) -> RenderedSQL:
    """マーカーをドライバのプレースホルダに置き換える.

    ``Raw`` の引数はプレースホルダにせず、テキストをそのまま埋め込む。
    ``Raw`` はパラメータにも番号付けにも含まれない。

    Args:
        sql_format: SQL テンプレート
        args: バインドする値のシーケンス
        dialect: RDBMS 方言（None の場合は ``?``）

    Returns:
        プレースホルダ形式の SQL とパラメータ

    Raises:
        SqlRenderError: マーカー数と引数の数が一致しない場合

    Examples:
        >>> bind("SELECT * FROM [?] WHERE id = [?]", [Raw("users"), 42])
        RenderedSQL(sql='SELECT * FROM users WHERE id = ?', params=(42,))

    """
    values = list(args or ())
    pattern = marker_pattern(sql_format)
    markers = len(pattern.findall(sql_format))
    if markers != len(values):
        msg = f"Template has {markers} marker(s) but {len(values)} argument(s) were given"
        raise SqlRenderError(msg)

    escape_percent = dialect is not None and dialect.is_format_style

    def sql_text(text: str) -> str:
        return text.replace("%", "%%") if escape_percent else text

    pieces: list[str] = []
    params: list[Any] = []
    pos = 0
    for value, match in zip(values, pattern.finditer(sql_format), strict=True):
        pieces.append(sql_text(sql_format[pos : match.start()]))
        if isinstance(value, Raw):
            pieces.append(sql_text(value.text))
        else:
            params.append(value)
            pieces.append(dialect.placeholder(len(params)) if dialect is not None else "?")
        pos = match.end()
    pieces.append(sql_text(sql_format[pos:]))
    return RenderedSQL(sql="".join(pieces), params=tuple(params))
