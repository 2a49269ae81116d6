import pytest

from super_methods.src.super_methods.config import PassOptions
from super_methods.src.super_methods.context import PassContext
from super_methods.src.super_methods.models.ast_models import (
    Param, ParamKind, Program, Return, Script,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap, JSDocInfo
from super_methods.src.super_methods.remove_super_methods import RemoveSuperMethodsPass, optimize
from tests.trees import (
    OVERRIDE, constructor, ctor_doc, method, params, super_call, super_link,
)


def hierarchy():
    base, sub = constructor("Base"), constructor("Sub")
    statements = [
        base,
        method("Base", "bar"),
        method("Base", "baz", params("a", "b"), [Return(None)]),
        sub,
        super_link("Sub", "Base"),
    ]
    return statements, {base: ctor_doc(), sub: ctor_doc("Base")}


def run(extra, docs=None, context=None):
    statements, annotations = hierarchy()
    statements += extra
    for stmt in extra:
        annotations[stmt] = OVERRIDE
    annotations.update(docs or {})
    script = Script("a.js", statements)
    report = RemoveSuperMethodsPass(context).process(Program([script], AnnotationMap(annotations)))
    return script, report


def test_removes_forwarding_override():
    override = method("Sub", "baz", params("a", "b"),
                      [super_call("Sub.superClass_", "baz", "a", "b")])
    script, report = run([override])
    assert override not in script.statements
    assert [d.statement for d in report.removed] == [override]
    assert len(script.statements) == 5


def test_bare_call_allowed_when_super_returns_nothing():
    override = method("Sub", "bar", [], [super_call("Base.prototype", "bar", returned=False)])
    script, _ = run([override])
    assert override not in script.statements


def test_bare_call_kept_when_super_returns_value():
    statements, annotations = hierarchy()
    statements[1] = method("Base", "bar", returns_value=True)
    override = method("Sub", "bar", [], [super_call("Base.prototype", "bar", returned=False)])
    annotations[override] = OVERRIDE
    script = Script("a.js", statements + [override])
    optimize(Program([script], AnnotationMap(annotations)))
    assert override in script.statements


def test_param_kind_mismatch_kept():
    override = method("Sub", "baz", [Param("a"), Param("b", ParamKind.OPTIONAL)],
                      [super_call("Sub.superClass_", "baz", "a", "b")])
    script, _ = run([override])
    assert override in script.statements


def optional_base():
    statements, annotations = hierarchy()
    b = Param("b", ParamKind.OPTIONAL, declared=True)
    statements[2] = method("Base", "baz", [Param("a"), b], [Return(None)])
    return statements, annotations


def test_undeclared_param_takes_superclass_optionality():
    statements, annotations = optional_base()
    plain = method("Sub", "baz", params("a", "b"),
                   [super_call("Sub.superClass_", "baz", "a", "b")])
    annotations[plain] = OVERRIDE
    script = Script("a.js", statements + [plain])
    optimize(Program([script], AnnotationMap(annotations)))
    assert plain not in script.statements


def test_declared_required_param_kept_against_optional():
    statements, annotations = optional_base()
    declared = method("Sub", "baz", [Param("a"), Param("b", declared=True)],
                      [super_call("Sub.superClass_", "baz", "a", "b")])
    annotations[declared] = OVERRIDE
    script = Script("a.js", statements + [declared])
    optimize(Program([script], AnnotationMap(annotations)))
    assert declared in script.statements


def test_missing_super_method_kept():
    override = method("Sub", "qux", [], [super_call("Sub.superClass_", "qux")])
    script, _ = run([override])
    assert override in script.statements


def test_super_class_of_other_class_kept():
    override = method("Sub", "bar", [], [super_call("Base.superClass_", "bar")])
    script, _ = run([override])
    assert override in script.statements


@pytest.mark.parametrize("doc", [
    JSDocInfo(is_override=True, markers=frozenset({"override", "wizaction"})),
    JSDocInfo(is_override=True, suppressions=frozenset({"checkTypes"})),
    JSDocInfo(is_override=True, suppressions=frozenset({"duplicate"})),
])
def test_annotations_keep_override(doc):
    override = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    script, report = run([override], {override: doc})
    assert override in script.statements
    assert report.candidates == 1
    assert report.removed == []


def test_custom_no_optimize_marker():
    override = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    doc = JSDocInfo(is_override=True, markers=frozenset({"override", "export"}))
    context = PassContext(PassOptions(no_optimize_markers=frozenset({"export"})))
    script, _ = run([override], {override: doc}, context)
    assert override in script.statements


def test_duplicate_across_units_kept():
    statements, annotations = hierarchy()
    first = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    second = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    annotations[first] = OVERRIDE
    annotations[second] = JSDocInfo(is_override=True, suppressions=frozenset({"duplicate"}))
    one = Script("one.js", statements + [first])
    two = Script("two.js", [second])
    context = PassContext()
    optimize(Program([one, two], AnnotationMap(annotations)), context)

    assert first in one.statements
    assert second in two.statements
    record = context.lookup("Sub", "bar")
    assert record.count == 2
    assert record.units == {"one.js", "two.js"}
    assert record.suppressed


def test_context_records_are_idempotent():
    override = method("Sub", "baz", params("a", "b"), [Return(None)])
    statements, annotations = hierarchy()
    program = Program([Script("a.js", statements + [override])], AnnotationMap(annotations))
    context = PassContext()
    optimize(program, context)
    optimize(program, context)
    assert context.lookup("Sub", "baz").count == 1
    assert not context.is_duplicated("Sub", "baz")


def test_optimize_script_with_annotations():
    statements, annotations = hierarchy()
    override = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    annotations[override] = OVERRIDE
    script = Script("a.js", statements + [override])
    assert optimize(script, annotations=AnnotationMap(annotations)) is script
    assert override not in script.statements


def test_optimize_script_without_annotations_is_noop():
    statements, _ = hierarchy()
    override = method("Sub", "bar", [], [super_call("Sub.superClass_", "bar")])
    script = Script("a.js", statements + [override])
    optimize(script)
    assert override in script.statements
