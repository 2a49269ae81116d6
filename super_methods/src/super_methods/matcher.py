from typing import Optional

from super_methods.src.super_methods.hierarchy import qualified_name
from super_methods.src.super_methods.models.ast_models import (
    Call, ExprStatement, ForwardingCall, GetProp, MethodDefinition, Name, ParamKind, Return,
    Spread, This,
)
from super_methods.src.super_methods.models.jsdoc_models import JSDocInfo


def super_reference(expr) -> Optional[tuple[str, bool]]:
    """
    (receiver, via_super_class) for `Receiver.superClass_` or
    `Receiver.prototype`, else None. Which class that actually names is the
    checker's business.
    """
    if not isinstance(expr, GetProp) or expr.prop not in ("superClass_", "prototype"):
        return None
    receiver = qualified_name(expr.obj)
    if receiver is None:
        return None
    return receiver, expr.prop == "superClass_"


def forwarding_call(definition: MethodDefinition) -> Optional[ForwardingCall]:
    """
    Extracts `SuperRef.<name>.call(this, ...)` from a body that is exactly that
    one call, bare or returned. Returns None for every other body shape.
    """
    if len(definition.body) != 1:
        return None
    statement = definition.body[0]
    if isinstance(statement, ExprStatement):
        call, returned = statement.expr, False
    elif isinstance(statement, Return):
        call, returned = statement.value, True
    else:
        return None
    if not isinstance(call, Call):
        return None

    # callee: <ref>.<name>.call
    callee = call.callee
    if not isinstance(callee, GetProp) or callee.prop != "call":
        return None
    method = callee.obj
    if not isinstance(method, GetProp) or method.prop != definition.name:
        return None
    ref = super_reference(method.obj)
    if ref is None:
        return None
    if not call.args or not isinstance(call.args[0], This):
        return None

    receiver, via_super_class = ref
    return ForwardingCall(receiver, via_super_class, method.prop, call.args[1:], returned)


def forwards_params_exactly(definition: MethodDefinition, forwarding: ForwardingCall) -> bool:
    """
    Every formal parameter, in order, passed on as the same identifier, and
    nothing else. A `...rest` parameter must be spread back out as `...rest`;
    a JSDoc variadic (`var_args`) is passed as the bare name.
    """
    params = definition.params
    if len(forwarding.args) != len(params):
        return False
    for param, arg in zip(params, forwarding.args):
        if param.spread:
            if not isinstance(arg, Spread):
                return False
            arg = arg.value
        if not isinstance(arg, Name) or arg.name != param.name:
            return False
    # Variadics are only meaningful in last position.
    return all(p.kind is not ParamKind.REST for p in params[:-1])


def match_override(definition: MethodDefinition, info: JSDocInfo) -> Optional[ForwardingCall]:
    """
    The Override Matcher: an `@override` whose body forwards its own
    parameters unchanged to a same-named method through a super reference.
    """
    if not info.is_override:
        return None
    forwarding = forwarding_call(definition)
    if forwarding is None or not forwards_params_exactly(definition, forwarding):
        return None
    return forwarding
