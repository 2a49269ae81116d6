# --- Pass configuration ----------------------------------------------------------
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PassOptions:
    """
    Knobs for the remove-super-methods pass.

    no_optimize_markers: JSDoc tags that keep a method out of the pass, e.g.
        methods reached through a non-standard dispatch path (`@wizaction`).
    duplicate_suppression: the `@suppress {...}` name marking an intentional
        duplicate definition.
    """
    no_optimize_markers: frozenset[str] = field(default_factory=lambda: frozenset({"wizaction"}))
    duplicate_suppression: str = "duplicate"


DEFAULT_OPTIONS = PassOptions()
