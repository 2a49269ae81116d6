import json

from super_methods.src.super_methods.models.ast_models import (
    Call, ExprStatement, GetProp, Name, OtherStatement, Param, ParamKind, Program, Return,
    Script, Spread, This, VarDecl,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap, JSDocInfo
from super_methods.src.super_methods.outputs.output import (
    print_summary, statement_source, to_json, to_source,
)
from super_methods.src.super_methods.remove_super_methods import RemoveSuperMethodsPass
from tests.trees import OVERRIDE, constructor, ctor_doc, method, super_call, super_link


def test_renders_hand_built_statements():
    stmt = method("Foo", "bar", [Param("a"), Param("rest", ParamKind.REST, spread=True)],
                  [super_call("Foo.superClass_", "bar", "a")])
    assert statement_source(stmt) == (
        "Foo.prototype.bar = function(a, ...rest) { return Foo.superClass_.bar.call(this, a); };")
    assert statement_source(VarDecl("x")) == "var x;"
    assert statement_source(Return(None)) == "return;"
    assert statement_source(OtherStatement("if (a) {}")) == "if (a) {}"


def test_spread_argument_rendering():
    call = Call(GetProp(Name("log"), "call"), [This(), Spread(Name("items"))])
    assert statement_source(ExprStatement(call)) == "log.call(this, ...items);"


def test_original_text_wins(js_parser):
    source = "/** @override */\nFoo.prototype.bar   =   function() {};"
    assert to_source(js_parser.parse_script(source)) == source


def test_program_joins_scripts():
    program = Program([Script("a.js", [VarDecl("a")]), Script("b.js", [VarDecl("b")])])
    assert to_source(program) == "var a;\nvar b;"


def report():
    base, sub = constructor("Base"), constructor("Sub")
    override = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    script = Script("a.js", [base, method("Base", "bar"), sub, super_link("Sub", "Base"),
                             override])
    annotations = AnnotationMap({base: ctor_doc(), sub: ctor_doc("Base"), override: OVERRIDE})
    return RemoveSuperMethodsPass().process(Program([script], annotations))


def test_json_report():
    out = json.loads(to_json(report()))
    assert out["candidates"] == 1
    assert out["removed"] == [{"owner": "Sub", "name": "bar", "params": [], "source": "a.js"}]
    assert {"name": "Sub", "extends": "Base", "superClass": "Base",
            "immediateSuper": "Base"} in out["classes"]


def test_summary(capsys):
    print_summary(report())
    out = capsys.readouterr().out
    assert " - Sub extends Base" in out
    assert "Sub.prototype.bar()  @ a.js" in out


def duplicated_report():
    first = method("Base", "bar")
    second = method("Base", "bar")
    annotations = AnnotationMap({second: JSDocInfo(suppressions=frozenset({"duplicate"}))})
    program = Program([Script("a.js", [first]), Script("b.js", [second])], annotations)
    return RemoveSuperMethodsPass().process(program)


def test_json_lists_duplicates():
    out = json.loads(to_json(duplicated_report()))
    assert out["duplicates"] == [{"owner": "Base", "name": "bar", "count": 2,
                                  "sources": ["a.js", "b.js"], "suppressed": True}]
    assert json.loads(to_json(report()))["duplicates"] == []


def test_summary_lists_duplicates(capsys):
    print_summary(duplicated_report())
    out = capsys.readouterr().out
    assert "=== DUPLICATE DEFINITIONS (1) ===" in out
    assert "Base.prototype.bar x2  @ a.js, b.js  (@suppress {duplicate})" in out
