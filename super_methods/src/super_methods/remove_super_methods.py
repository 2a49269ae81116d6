"""
Remove-super-methods pass
-------------------------
Deletes `@override` methods whose body only forwards to the immediate
superclass's method of the same name with the same arguments, e.g.

    /** @override */
    Foo.prototype.bar = function(a, b) { return Foo.superClass_.bar.call(this, a, b); };

Prototype lookup already reaches `FooBase.prototype.bar`, so the override is
dead weight. Anything the pass cannot prove safe is left alone.
"""
import time
from dataclasses import dataclass, field
from typing import Optional, Union

from super_methods.src.super_methods.checker import SoundnessChecker
from super_methods.src.super_methods.context import DefinitionRecord, PassContext
from super_methods.src.super_methods.hierarchy import HierarchyResolver
from super_methods.src.super_methods.logger import logger
from super_methods.src.super_methods.matcher import match_override
from super_methods.src.super_methods.models.ast_models import (
    ClassDeclaration, MethodDefinition, Program, Script,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap
from super_methods.src.super_methods.rewriter import remove_definition


@dataclass
class PassReport:
    """What one run saw and did."""
    classes: dict[str, ClassDeclaration] = field(default_factory=dict)
    candidates: int = 0  # forwarding overrides found by the matcher
    removed: list[MethodDefinition] = field(default_factory=list)
    duplicates: dict[tuple[str, str], DefinitionRecord] = field(default_factory=dict)


class RemoveSuperMethodsPass:

    def __init__(self, context: Optional[PassContext] = None):
        self.context = context if context is not None else PassContext()

    def process(self, program: Program, annotations: Optional[AnnotationMap] = None) -> PassReport:
        annotations = annotations if annotations is not None else program.annotations
        start_time = time.time()
        logger.info(
            f"[RemoveSuperMethods] Starting pass over {len(program.scripts)} compilation unit(s)"
        )

        resolver = HierarchyResolver(program, annotations)
        for owner, name, assign, enclosing, script in resolver.iter_assignments():
            self.context.record(owner, name, assign, script.source_name, annotations.info(enclosing))
        checker = SoundnessChecker(resolver, annotations, self.context)

        # Decide everything against the unmodified tree, then delete.
        report = PassReport(classes=dict(resolver.classes))
        for script in program.scripts:
            for statement in script.statements:
                definition = resolver.definition_for(statement)
                if definition is None:
                    continue
                forwarding = match_override(definition, annotations.info(statement))
                if forwarding is None:
                    continue
                report.candidates += 1
                if checker.check(definition, forwarding):
                    report.removed.append(definition)

        for definition in report.removed:
            remove_definition(definition)
        report.duplicates = self.context.duplicates()

        logger.info(
            f"[RemoveSuperMethods] Finished in {time.time() - start_time:.3f}s. "
            f"Removed {len(report.removed)} of {report.candidates} forwarding override(s)"
        )
        return report


def optimize(tree: Union[Program, Script], context: Optional[PassContext] = None,
             annotations: Optional[AnnotationMap] = None):
    """
    Runs the pass over `tree` (a Program, or a single Script) in place and
    returns it. A Script carries no annotations of its own, so pass them in.
    """
    if isinstance(tree, Script):
        program = Program([tree], annotations if annotations is not None else AnnotationMap())
    else:
        program = tree
    RemoveSuperMethodsPass(context).process(program, annotations)
    return tree
