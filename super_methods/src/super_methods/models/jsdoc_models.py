# --- JSDoc annotations attached to statements ------------------------------------
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Optional


@dataclass(frozen=True)
class ParamDoc:
    """One `@param {type} name` tag."""
    name: str
    type_expr: str = ""

    @property
    def is_optional(self) -> bool:
        return self.type_expr.endswith("=")

    @property
    def is_rest(self) -> bool:
        return self.type_expr.startswith("...")


@dataclass(frozen=True)
class JSDocInfo:
    """The subset of a JSDoc block the pass reads."""
    is_override: bool = False
    is_constructor: bool = False
    extends: Optional[str] = None
    suppressions: frozenset[str] = frozenset()
    markers: frozenset[str] = frozenset()  # every bare tag name, e.g. "wizaction"
    params: tuple[ParamDoc, ...] = ()
    has_return: bool = False

    def param(self, name: str) -> Optional[ParamDoc]:
        for p in self.params:
            if p.name == name:
                return p
        return None


EMPTY_JSDOC = JSDocInfo()


class AnnotationMap(Mapping):
    """
    Read-only node -> JSDocInfo mapping, keyed by node identity.
    Built by the front end before the pass runs; the pass only reads it.
    """

    def __init__(self, entries: Optional[Mapping] = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, node) -> JSDocInfo:
        return self._entries[node]

    def __iter__(self) -> Iterator:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def info(self, node) -> JSDocInfo:
        """JSDoc for `node`, or an empty record when it has none."""
        return self._entries.get(node, EMPTY_JSDOC)
