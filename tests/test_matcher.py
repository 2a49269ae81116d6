from super_methods.src.super_methods.hierarchy import method_definition
from super_methods.src.super_methods.matcher import (
    forwarding_call, match_override, super_reference,
)
from super_methods.src.super_methods.models.ast_models import (
    Call, ExprStatement, GetProp, Name, OtherExpr, Param, ParamKind, Return, Script, Spread,
    This,
)
from super_methods.src.super_methods.models.jsdoc_models import JSDocInfo
from tests.trees import OVERRIDE, method, params, qname, super_call

SCRIPT = Script("a.js")


def definition(stmt):
    return method_definition(stmt, SCRIPT)


def test_super_reference_forms():
    assert super_reference(qname("Foo.superClass_")) == ("Foo", True)
    assert super_reference(qname("ns.FooBase.prototype")) == ("ns.FooBase", False)
    assert super_reference(qname("Foo.bar")) is None
    assert super_reference(GetProp(This(), "prototype")) is None


def test_returned_forwarding_call():
    d = definition(method("Foo", "baz", params("time", "loc"),
                          [super_call("Foo.superClass_", "baz", "time", "loc")]))
    fwd = match_override(d, OVERRIDE)
    assert fwd is not None
    assert (fwd.receiver, fwd.via_super_class, fwd.method, fwd.returned) == (
        "Foo", True, "baz", True)
    assert [a.name for a in fwd.args] == ["time", "loc"]


def test_bare_forwarding_call():
    d = definition(method("Foo", "bar", [], [super_call("FooBase.prototype", "bar",
                                                         returned=False)]))
    fwd = match_override(d, OVERRIDE)
    assert fwd is not None and not fwd.returned and not fwd.via_super_class


def test_requires_override_annotation():
    d = definition(method("Foo", "bar", [], [super_call("Foo.superClass_", "bar")]))
    assert match_override(d, JSDocInfo()) is None


def test_body_shapes_rejected():
    call = super_call("Foo.superClass_", "bar")
    assert forwarding_call(definition(method("Foo", "bar", [], []))) is None
    assert forwarding_call(definition(method("Foo", "bar", [], [call, call]))) is None
    assert forwarding_call(definition(method("Foo", "bar", [], [Return(None)]))) is None
    assert forwarding_call(definition(
        method("Foo", "bar", [], [ExprStatement(OtherExpr("x + 1"))]))) is None


def test_callee_shapes_rejected():
    # .apply instead of .call
    apply = Return(Call(GetProp(GetProp(qname("Foo.superClass_"), "bar"), "apply"),
                        [This()]))
    assert forwarding_call(definition(method("Foo", "bar", [], [apply]))) is None
    # different method name
    other = super_call("Foo.superClass_", "buzz")
    assert forwarding_call(definition(method("Foo", "bar", [], [other]))) is None
    # no receiver argument
    bare = Return(Call(GetProp(GetProp(qname("Foo.superClass_"), "bar"), "call"), []))
    assert forwarding_call(definition(method("Foo", "bar", [], [bare]))) is None
    # receiver is not `this`
    other_this = Return(Call(GetProp(GetProp(qname("Foo.superClass_"), "bar"), "call"),
                             [Name("self")]))
    assert forwarding_call(definition(method("Foo", "bar", [], [other_this]))) is None


def test_argument_mismatches_rejected():
    def check(*args):
        d = definition(method("Foo", "baz", params("time", "loc"),
                              [super_call("Foo.superClass_", "baz", *args)]))
        return match_override(d, OVERRIDE)

    assert check("time", "loc") is not None
    assert check("loc", "time") is None
    assert check("time") is None
    assert check("time", "loc", "loc") is None
    assert check("time", "place") is None


def test_rest_parameter_forwarding():
    def forward(param, arg):
        call = Call(GetProp(GetProp(qname("Foo.superClass_"), "log"), "call"), [This(), arg])
        d = definition(method("Foo", "log", [param], [Return(call)]))
        return match_override(d, OVERRIDE)

    rest = Param("items", ParamKind.REST, spread=True)
    assert forward(rest, Spread(Name("items"))) is not None
    assert forward(rest, Name("items")) is None
    var_args = Param("var_args", ParamKind.REST)
    assert forward(var_args, Name("var_args")) is not None
    assert forward(var_args, Spread(Name("var_args"))) is None


def test_rest_must_be_last():
    fn_params = [Param("first", ParamKind.REST), Param("second")]
    d = definition(method("Foo", "m", fn_params,
                          [super_call("Foo.superClass_", "m", "first", "second")]))
    assert match_override(d, OVERRIDE) is None
