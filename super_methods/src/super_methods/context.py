# --- Per-invocation state -------------------------------------------------------
from dataclasses import dataclass, field
from typing import Optional

from super_methods.src.super_methods.config import DEFAULT_OPTIONS, PassOptions
from super_methods.src.super_methods.models.jsdoc_models import JSDocInfo


@dataclass
class DefinitionRecord:
    """Every assignment seen to one `Owner.prototype.method` member."""
    nodes: set = field(default_factory=set)  # assignment nodes, by identity
    units: set[str] = field(default_factory=set)  # source names
    suppressed: bool = False  # some definition says `@suppress {duplicate}`

    @property
    def count(self) -> int:
        return len(self.nodes)


@dataclass
class PassContext:
    """
    State shared by all compilation units of one compiler invocation. Create
    one per invocation; a context is never reused across invocations.
    """
    options: PassOptions = DEFAULT_OPTIONS
    definitions: dict[tuple[str, str], DefinitionRecord] = field(default_factory=dict)

    def record(self, owner: str, name: str, node, source_name: str, info: JSDocInfo):
        record = self.definitions.setdefault((owner, name), DefinitionRecord())
        record.nodes.add(node)
        record.units.add(source_name)
        if self.options.duplicate_suppression in info.suppressions:
            record.suppressed = True

    def lookup(self, owner: str, name: str) -> Optional[DefinitionRecord]:
        return self.definitions.get((owner, name))

    def is_duplicated(self, owner: str, name: str) -> bool:
        """
        Assigned more than once anywhere in this invocation, nested
        assignments included. An intentional duplicate (`@suppress
        {duplicate}`) still counts: with two definitions there is no telling
        which one is authoritative.
        """
        record = self.lookup(owner, name)
        return record is not None and record.count > 1

    def duplicates(self) -> dict[tuple[str, str], DefinitionRecord]:
        return {key: r for key, r in self.definitions.items() if r.count > 1}
