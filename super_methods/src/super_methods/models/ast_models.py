# --- Tree model consumed by the pass ------------------------------------------
#
# A closed set of node shapes. Anything the front end does not model becomes
# OtherStatement / OtherExpr, which no matcher ever accepts.
#
# eq=False keeps identity equality and hashing, so nodes can key an
# AnnotationMap.
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap


class ParamKind(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    REST = "rest"


@dataclass(eq=False)
class Param:
    """A formal parameter of a function literal."""
    name: str
    kind: ParamKind = ParamKind.REQUIRED
    spread: bool = False  # written as `...name`, as opposed to a JSDoc var_args
    declared: bool = False  # kind stated by syntax, naming convention or @param


# --- Expressions ---------------------------------------------------------------

@dataclass(eq=False)
class Name:
    name: str


@dataclass(eq=False)
class This:
    pass


@dataclass(eq=False)
class GetProp:
    """Member access `obj.prop` (never computed `obj[prop]`)."""
    obj: "Expr"
    prop: str


@dataclass(eq=False)
class Call:
    callee: "Expr"
    args: list["Expr"] = field(default_factory=list)


@dataclass(eq=False)
class Spread:
    """`...value` inside an argument list."""
    value: "Expr"


@dataclass(eq=False)
class Assign:
    target: "Expr"
    value: "Expr"


@dataclass(eq=False)
class Function:
    """A `function (...) {...}` literal. Arrow functions are OtherExpr."""
    params: list[Param] = field(default_factory=list)
    body: list["Statement"] = field(default_factory=list)
    name: Optional[str] = None
    returns_value: bool = False  # some `return <expr>` outside nested functions


@dataclass(eq=False)
class OtherExpr:
    """Any expression shape the pass does not look into."""
    text: str = ""
    assignments: list["Assign"] = field(default_factory=list)  # found anywhere inside


Expr = Union[Name, This, GetProp, Call, Spread, Assign, Function, OtherExpr]


# --- Statements ----------------------------------------------------------------

@dataclass(eq=False)
class ExprStatement:
    expr: Expr
    text: str = ""  # original source, leading JSDoc included


@dataclass(eq=False)
class Return:
    value: Optional[Expr] = None
    text: str = ""


@dataclass(eq=False)
class VarDecl:
    """`var|let|const name = value` with a single declarator."""
    name: str
    value: Optional[Expr] = None
    kind: str = "var"
    text: str = ""


@dataclass(eq=False)
class OtherStatement:
    text: str = ""
    assignments: list[Assign] = field(default_factory=list)  # found anywhere inside


Statement = Union[ExprStatement, Return, VarDecl, OtherStatement]


# --- Compilation units -----------------------------------------------------------

@dataclass(eq=False)
class Script:
    """One compilation unit (one source file)."""
    source_name: str
    statements: list[Statement] = field(default_factory=list)


@dataclass(eq=False)
class Program:
    """All compilation units of one compiler invocation, plus their JSDoc."""
    scripts: list[Script] = field(default_factory=list)
    annotations: AnnotationMap = field(default_factory=AnnotationMap)


# --- Derived, read-only views built by the pass ---------------------------------

@dataclass
class ClassDeclaration:
    """A constructor and what we know about its superclass."""
    name: str  # qualified, e.g. "ns.Foo"
    extends: Optional[str] = None  # from @extends {Base}
    super_class: Optional[str] = None  # from Sub.superClass_ = Base.prototype

    @property
    def immediate_super(self) -> Optional[str]:
        # Both idioms must be present and agree.
        if self.extends and self.super_class and self.extends == self.super_class:
            return self.extends
        return None


@dataclass
class MethodDefinition:
    """`Owner.prototype.name = function (...) {...}` as a top-level statement."""
    owner: str
    name: str
    function: Function
    statement: Statement
    script: Script

    @property
    def params(self) -> list[Param]:
        return self.function.params

    @property
    def body(self) -> list[Statement]:
        return self.function.body


@dataclass
class ForwardingCall:
    """
    `<receiver>.superClass_.<method>.call(this, args...)` or
    `<receiver>.prototype.<method>.call(this, args...)` found in an override.
    """
    receiver: str
    via_super_class: bool  # `.superClass_` form; otherwise `.prototype`
    method: str
    args: list[Expr]
    returned: bool  # the call is the operand of `return`
