from collections import defaultdict
from typing import Optional

from super_methods.src.super_methods.logger import logger
from super_methods.src.super_methods.models.ast_models import (
    Assign, Call, ClassDeclaration, ExprStatement, Function, GetProp, MethodDefinition, Name,
    OtherExpr, OtherStatement, Program, Return, Script, Spread, VarDecl,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap


def qualified_name(expr) -> Optional[str]:
    """`a.b.C` for a chain of plain property reads rooted at a name, else None."""
    parts = []
    while isinstance(expr, GetProp):
        parts.append(expr.prop)
        expr = expr.obj
    if not isinstance(expr, Name):
        return None
    parts.append(expr.name)
    return ".".join(reversed(parts))


def method_target(expr) -> Optional[tuple[str, str]]:
    """(owner, method) for `Owner.prototype.method`, else None."""
    if not isinstance(expr, GetProp) or not isinstance(expr.obj, GetProp):
        return None
    if expr.obj.prop != "prototype":
        return None
    owner = qualified_name(expr.obj.obj)
    if owner is None:
        return None
    return owner, expr.prop


def assignments_in(statement):
    """
    Yields (assign, enclosing statement) for every assignment at or below
    `statement`: function bodies, IIFEs and unmodelled blocks included.
    """
    stack = [(statement, statement)]
    while stack:
        node, enclosing = stack.pop()
        if isinstance(node, Assign):
            yield node, enclosing
            stack += [(node.target, enclosing), (node.value, enclosing)]
        elif isinstance(node, ExprStatement):
            stack.append((node.expr, node))
        elif isinstance(node, (Return, VarDecl)):
            if node.value is not None:
                stack.append((node.value, node))
        elif isinstance(node, Call):
            stack += [(node.callee, enclosing)] + [(a, enclosing) for a in node.args]
        elif isinstance(node, GetProp):
            stack.append((node.obj, enclosing))
        elif isinstance(node, Spread):
            stack.append((node.value, enclosing))
        elif isinstance(node, Function):
            stack += [(s, s) for s in node.body]
        elif isinstance(node, (OtherStatement, OtherExpr)):
            stack += [(a, enclosing) for a in node.assignments]


def method_definition(statement, script: Script) -> Optional[MethodDefinition]:
    """
    Recognises `Owner.prototype.name = function (...) {...};` as a statement.
    """
    if not isinstance(statement, ExprStatement):
        return None
    assign = statement.expr
    if not isinstance(assign, Assign) or not isinstance(assign.value, Function):
        return None
    target = method_target(assign.target)
    if target is None:
        return None
    owner, name = target
    return MethodDefinition(owner, name, assign.value, statement, script)


class HierarchyResolver:
    """
    Walks every top-level statement once and records:
      - class declarations (`@constructor` / `@extends {Base}` on a var or an
        assignment),
      - `Sub.superClass_ = Base.prototype` links,
      - every prototype method definition, per (owner, name),
      - every assignment to `Owner.prototype.name` anywhere in the program,
        nested ones included, so redefinitions can be counted.

    A class has a confirmed immediate superclass only when the JSDoc and the
    superClass_ link both exist and name the same class. Conflicting
    declarations of either kind leave the class unconfirmed.
    """

    def __init__(self, program: Program, annotations: Optional[AnnotationMap] = None):
        self.program = program
        self.annotations = annotations if annotations is not None else program.annotations
        self.classes: dict[str, ClassDeclaration] = {}
        self.methods: dict[tuple[str, str], list[MethodDefinition]] = defaultdict(list)
        self.definitions: dict = {}  # statement -> MethodDefinition
        # (owner, name) -> [(assign, enclosing statement, script)]
        self.assignments: dict[tuple[str, str], list] = defaultdict(list)
        self._conflicts: set[str] = set()
        for script in program.scripts:
            for statement in script.statements:
                self._index_statement(statement, script)
                for assign, enclosing in assignments_in(statement):
                    target = method_target(assign.target)
                    if target is not None:
                        self.assignments[target].append((assign, enclosing, script))

    # -- lookups ----------------------------------------------------------------

    def immediate_super(self, class_name: str) -> Optional[str]:
        if class_name in self._conflicts:
            return None
        decl = self.classes.get(class_name)
        return decl.immediate_super if decl is not None else None

    def own_method(self, class_name: str, method: str) -> Optional[MethodDefinition]:
        """
        The single definition of `method` on `class_name`'s own prototype. Any
        other assignment to that member, nested or not, makes it ambiguous.
        """
        defs = self.methods.get((class_name, method), [])
        if len(defs) != 1 or len(self.assignments.get((class_name, method), [])) != 1:
            return None
        return defs[0]

    def definition_for(self, statement) -> Optional[MethodDefinition]:
        return self.definitions.get(statement)

    def iter_assignments(self):
        """(owner, name, assign, enclosing statement, script) for every member assignment."""
        for (owner, name), found in self.assignments.items():
            for assign, enclosing, script in found:
                yield owner, name, assign, enclosing, script

    # -- indexing ---------------------------------------------------------------

    def _index_statement(self, statement, script: Script):
        info = self.annotations.info(statement)

        if isinstance(statement, VarDecl):
            if info.is_constructor or info.extends:
                self._declare(statement.name, info.extends)
            return
        if not isinstance(statement, ExprStatement) or not isinstance(statement.expr, Assign):
            return

        assign = statement.expr
        definition = method_definition(statement, script)
        if definition is not None:
            self.methods[(definition.owner, definition.name)].append(definition)
            self.definitions[statement] = definition
            return

        target = qualified_name(assign.target)
        if target is None:
            return
        if info.is_constructor or info.extends:
            self._declare(target, info.extends)
        elif isinstance(assign.target, GetProp) and assign.target.prop == "superClass_":
            self._link(qualified_name(assign.target.obj), assign.value)

    def _declare(self, name: str, extends: Optional[str]):
        decl = self.classes.get(name)
        if decl is None:
            self.classes[name] = ClassDeclaration(name, extends=extends)
        elif decl.extends is None:
            decl.extends = extends
        elif extends is not None and decl.extends != extends:
            logger.debug(f"[RemoveSuperMethods] Conflicting @extends for {name}")
            self._conflicts.add(name)

    def _link(self, sub: Optional[str], value):
        # Only `Base.prototype` on the right-hand side names a superclass.
        if sub is None or not isinstance(value, GetProp) or value.prop != "prototype":
            return
        base = qualified_name(value.obj)
        if base is None:
            return
        decl = self.classes.setdefault(sub, ClassDeclaration(sub))
        if decl.super_class is None:
            decl.super_class = base
        elif decl.super_class != base:
            logger.debug(f"[RemoveSuperMethods] Conflicting superClass_ for {sub}")
            self._conflicts.add(sub)
