import json
from typing import Union

from super_methods.src.super_methods.models.ast_models import (
    Assign, Call, ExprStatement, Function, GetProp, Name, OtherExpr, OtherStatement, Param,
    ParamKind, Program, Return, Script, Spread, This, VarDecl,
)
from super_methods.src.super_methods.remove_super_methods import PassReport


# --- Printing the tree back to JavaScript ----------------------------------------

def expr_source(expr) -> str:
    if isinstance(expr, Name):
        return expr.name
    if isinstance(expr, This):
        return "this"
    if isinstance(expr, GetProp):
        return f"{expr_source(expr.obj)}.{expr.prop}"
    if isinstance(expr, Call):
        args = ", ".join(expr_source(a) for a in expr.args)
        return f"{expr_source(expr.callee)}({args})"
    if isinstance(expr, Spread):
        return f"...{expr_source(expr.value)}"
    if isinstance(expr, Assign):
        return f"{expr_source(expr.target)} = {expr_source(expr.value)}"
    if isinstance(expr, Function):
        params = ", ".join(_param_source(p) for p in expr.params)
        name = f" {expr.name}" if expr.name else ""
        body = " ".join(statement_source(s) for s in expr.body)
        return f"function{name}({params}) {{{' ' + body + ' ' if body else ''}}}"
    if isinstance(expr, OtherExpr):
        return expr.text
    raise TypeError(f"not an expression node: {expr!r}")


def _param_source(param: Param) -> str:
    return f"...{param.name}" if param.kind is ParamKind.REST and param.spread else param.name


def statement_source(statement) -> str:
    """
    Statements read from source print as their original text (leading
    comments included); hand-built ones are rendered from the tree.
    """
    if statement.text:
        return statement.text
    if isinstance(statement, ExprStatement):
        return f"{expr_source(statement.expr)};"
    if isinstance(statement, Return):
        return "return;" if statement.value is None else f"return {expr_source(statement.value)};"
    if isinstance(statement, VarDecl):
        value = f" = {expr_source(statement.value)}" if statement.value is not None else ""
        return f"{statement.kind} {statement.name}{value};"
    if isinstance(statement, OtherStatement):
        return statement.text
    raise TypeError(f"not a statement node: {statement!r}")


def to_source(tree: Union[Program, Script]) -> str:
    if isinstance(tree, Program):
        return "\n".join(to_source(script) for script in tree.scripts)
    return "\n".join(statement_source(s) for s in tree.statements)


# --- Pretty printing & JSON export ------------------------------------------

def print_summary(report: PassReport):
    """
    Human-friendly printout of what we found.
    """
    print("\n=== CLASSES ===")
    for name, decl in sorted(report.classes.items(), key=lambda kv: kv[0]):
        parent = decl.immediate_super
        if parent:
            print(f" - {name} extends {parent}")
        elif decl.extends or decl.super_class:
            print(f" - {name} (unconfirmed: @extends {decl.extends}, superClass_ {decl.super_class})")
        else:
            print(f" - {name}")

    print(f"\n=== REMOVED OVERRIDES ({len(report.removed)} of {report.candidates} candidates) ===")
    for definition in report.removed:
        params = ", ".join(p.name for p in definition.params)
        print(f"  - {definition.owner}.prototype.{definition.name}({params})"
              f"  @ {definition.script.source_name}")

    if report.duplicates:
        print(f"\n=== DUPLICATE DEFINITIONS ({len(report.duplicates)}) ===")
        for (owner, name), record in sorted(report.duplicates.items()):
            note = "  (@suppress {duplicate})" if record.suppressed else ""
            print(f"  - {owner}.prototype.{name} x{record.count}"
                  f"  @ {', '.join(sorted(record.units))}{note}")


def to_json(report: PassReport) -> str:
    """
    Serializes the report to JSON.
    """
    out = {
        "classes": [
            {
                "name": name,
                "extends": decl.extends,
                "superClass": decl.super_class,
                "immediateSuper": decl.immediate_super,
            }
            for name, decl in sorted(report.classes.items(), key=lambda kv: kv[0])
        ],
        "candidates": report.candidates,
        "removed": [
            {
                "owner": d.owner,
                "name": d.name,
                "params": [{"name": p.name, "kind": p.kind.value} for p in d.params],
                "source": d.script.source_name,
            }
            for d in report.removed
        ],
        "duplicates": [
            {
                "owner": owner,
                "name": name,
                "count": record.count,
                "sources": sorted(record.units),
                "suppressed": record.suppressed,
            }
            for (owner, name), record in sorted(report.duplicates.items())
        ],
    }
    return json.dumps(out, indent=2)
