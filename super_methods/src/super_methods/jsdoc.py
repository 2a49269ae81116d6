# --- JSDoc comment reading ---------------------------------------------------------
import re
from typing import Iterable

from super_methods.src.super_methods.models.jsdoc_models import JSDocInfo, ParamDoc

_TAG = re.compile(r"@([A-Za-z_][\w]*)")


def is_jsdoc(comment: str) -> bool:
    return comment.startswith("/**") and not comment.startswith("/**/")


_FILE_LEVEL_TAGS = {"fileoverview", "license", "preserve"}


def is_file_level(comment: str) -> bool:
    """A `/** @fileoverview ... */` style header, which belongs to no statement."""
    return is_jsdoc(comment) and bool(parse_jsdoc(comment).markers & _FILE_LEVEL_TAGS)


def _strip_comment(comment: str) -> str:
    body = comment[3:] if comment.startswith("/**") else comment
    if body.endswith("*/"):
        body = body[:-2]
    # Drop the leading " * " gutter of multi-line blocks.
    return "\n".join(re.sub(r"^\s*\*\s?", "", line) for line in body.splitlines())


def _braced(text: str, start: int) -> tuple[str, int]:
    """
    Reads a `{...}` type expression starting at or after `start`, allowing
    nested braces (`{{a: number}}`). Returns ("", start) when none follows.
    """
    i = start
    while i < len(text) and text[i] in " \t\n":
        i += 1
    if i >= len(text) or text[i] != "{":
        return "", start
    depth = 0
    for j in range(i, len(text)):
        if text[j] == "{":
            depth += 1
        elif text[j] == "}":
            depth -= 1
            if depth == 0:
                return text[i + 1:j].strip(), j + 1
    return "", start


def parse_jsdoc(comment: str) -> JSDocInfo:
    """
    Parses one `/** ... */` block. Unknown tags are kept in `markers` so that
    callers can look for things like `@wizaction` without this module knowing
    about them.
    """
    text = _strip_comment(comment)
    markers: set[str] = set()
    suppressions: set[str] = set()
    params: list[ParamDoc] = []
    extends = None
    has_return = False

    for match in _TAG.finditer(text):
        tag = match.group(1)
        markers.add(tag)
        rest = match.end()
        if tag in ("extends", "inherits"):
            type_expr, _ = _braced(text, rest)
            if type_expr:
                extends = type_expr.lstrip("!")
        elif tag == "suppress":
            type_expr, _ = _braced(text, rest)
            suppressions.update(s.strip() for s in re.split(r"[,|]", type_expr) if s.strip())
        elif tag == "param":
            type_expr, end = _braced(text, rest)
            name = re.match(r"\s*\[?([\w$]+)", text[end:])
            if name:
                params.append(ParamDoc(name=name.group(1), type_expr=type_expr))
        elif tag in ("return", "returns"):
            has_return = True

    return JSDocInfo(
        is_override="override" in markers,
        is_constructor="constructor" in markers,
        extends=extends,
        suppressions=frozenset(suppressions),
        markers=frozenset(markers),
        params=tuple(params),
        has_return=has_return,
    )


def merge_jsdoc(comments: Iterable[str]) -> JSDocInfo:
    """
    Several consecutive JSDoc blocks in front of one statement describe that
    statement together (e.g. one `@param` per block).
    """
    infos = [parse_jsdoc(c) for c in comments if is_jsdoc(c)]
    if not infos:
        return JSDocInfo()
    if len(infos) == 1:
        return infos[0]
    extends = None
    for info in infos:
        extends = info.extends or extends
    return JSDocInfo(
        is_override=any(i.is_override for i in infos),
        is_constructor=any(i.is_constructor for i in infos),
        extends=extends,
        suppressions=frozenset().union(*(i.suppressions for i in infos)),
        markers=frozenset().union(*(i.markers for i in infos)),
        params=tuple(p for i in infos for p in i.params),
        has_return=any(i.has_return for i in infos),
    )
