import ctypes
import os
from typing import Iterable, Optional

from tree_sitter import Language, Node, Parser

from super_methods.src.super_methods.jsdoc import is_file_level, merge_jsdoc
from super_methods.src.super_methods.models.ast_models import (
    Assign, Call, ExprStatement, Function, GetProp, Name, OtherExpr, OtherStatement,
    Param, ParamKind, Program, Return, Script, Spread, This, VarDecl,
)
from super_methods.src.super_methods.models.jsdoc_models import AnnotationMap, JSDocInfo
from super_methods.src.super_methods.tree_sitter_helpers import node_text, span_text, unwrap_parens

# Node types that open a new `return` scope.
_FUNCTION_TYPES = {
    "function_expression", "function", "function_declaration", "generator_function",
    "generator_function_declaration", "arrow_function", "method_definition",
    "class", "class_declaration",
}


# --- Tree-sitter language loading -------------------------------------------

def load_javascript_language() -> Language:
    """
    Loads the Tree-sitter JavaScript grammar for the Python bindings.
    We try the packaged grammar (tree_sitter_javascript) first. If that isn't
    available, we try a user-built shared library via TS_LANGUAGE_SO.
    """
    try:
        import tree_sitter_javascript
        return Language(tree_sitter_javascript.language())
    except ImportError:
        pass

    # Manual mode: user must have built a .so from tree-sitter-javascript
    #   git clone https://github.com/tree-sitter/tree-sitter-javascript
    #   cc -shared -fPIC -Isrc src/parser.c src/scanner.c -o build/javascript.so
    #   export TS_LANGUAGE_SO=build/javascript.so
    so_path = os.environ.get("TS_LANGUAGE_SO")
    if not so_path or not os.path.exists(so_path):
        raise RuntimeError(
            "Could not load JavaScript grammar.\n"
            "- Install `tree_sitter_javascript` (pip install tree-sitter-javascript), OR\n"
            "- Build a shared library and set TS_LANGUAGE_SO to its path.\n"
            "See code comments for build instructions."
        )
    lib = ctypes.cdll.LoadLibrary(so_path)
    lib.tree_sitter_javascript.restype = ctypes.c_void_p
    return Language(lib.tree_sitter_javascript())


# --- The front end -------------------------------------------------------------

class JavaScriptParser:
    """
    Parses JavaScript with Tree-sitter and converts the concrete tree into the
    pass's tree model. JSDoc blocks directly in front of a statement are parsed
    and stored in the program's AnnotationMap under that statement.
    """

    def __init__(self):
        self.language = load_javascript_language()
        self.parser = Parser(self.language)

    def parse(self, source: str):
        """
        Parses a single source string into a Tree-sitter tree.
        """
        return self.parser.parse(source.encode("utf-8"))

    def parse_script(self, source: str, source_name: str = "<input>") -> Program:
        return self.parse_program([(source_name, source)])

    def parse_program(self, sources: Iterable[tuple[str, str]]) -> Program:
        """
        Builds one Program from (source_name, source) pairs, one Script per pair,
        in the given order.
        """
        annotations: dict = {}
        scripts = []
        for source_name, source in sources:
            source_bytes = source.encode("utf-8")
            root: Node = self.parse(source).root_node
            builder = _TreeBuilder(source_bytes, annotations)
            scripts.append(Script(source_name, builder.statements(root.children)))
        return Program(scripts, AnnotationMap(annotations))


class _TreeBuilder:
    """Converts one file's Tree-sitter nodes, recording JSDoc as it goes."""

    def __init__(self, source_bytes: bytes, annotations: dict):
        self.source_bytes = source_bytes
        self.annotations = annotations

    def text(self, node) -> str:
        return node_text(self.source_bytes, node)

    # -- statements -------------------------------------------------------------

    def statements(self, children) -> list:
        """
        Converts a run of statement nodes. Comments are folded into the text of
        the statement that follows them; trailing comments become an
        OtherStatement so that printing loses nothing.
        """
        out = []
        pending: list = []
        for child in children:
            if child.type == "comment":
                pending.append(child)
                if is_file_level(self.text(child)):
                    # File headers describe the file, not the next statement.
                    out.append(OtherStatement(span_text(self.source_bytes, pending[0], child)))
                    pending = []
                continue
            if not child.is_named:
                # `{`, `}` of a block, stray `;`
                continue
            jsdoc = merge_jsdoc(self.text(c) for c in pending)
            first = pending[0] if pending else child
            stmt = self.statement(child, jsdoc)
            stmt.text = span_text(self.source_bytes, first, child)
            if pending:
                self.annotations[stmt] = jsdoc
            out.append(stmt)
            pending = []
        if pending:
            out.append(OtherStatement(span_text(self.source_bytes, pending[0], pending[-1])))
        return out

    def statement(self, node, jsdoc: JSDocInfo):
        if node.type == "expression_statement":
            exprs = [c for c in node.named_children if c.type != "comment"]
            if len(exprs) == 1:
                return ExprStatement(self.expression(exprs[0], jsdoc))
        elif node.type == "return_statement":
            values = [c for c in node.named_children if c.type != "comment"]
            if not values:
                return Return(None)
            if len(values) == 1:
                return Return(self.expression(values[0], jsdoc))
        elif node.type in ("variable_declaration", "lexical_declaration"):
            decls = [c for c in node.named_children if c.type == "variable_declarator"]
            if len(decls) == 1:
                name_node = decls[0].child_by_field_name("name")
                value_node = decls[0].child_by_field_name("value")
                if name_node is not None and name_node.type == "identifier":
                    value = self.expression(value_node, jsdoc) if value_node is not None else None
                    return VarDecl(self.text(name_node), value, kind=self.text(node.children[0]))
        return OtherStatement(self.text(node), self.nested_assignments(node))

    # -- expressions ------------------------------------------------------------

    def expression(self, node, jsdoc: Optional[JSDocInfo] = None):
        """
        `jsdoc` is the enclosing statement's JSDoc; it only matters for the
        parameter kinds of a function literal assigned by that statement.
        """
        node = unwrap_parens(node)
        kind = node.type
        if kind == "identifier":
            return Name(self.text(node))
        if kind == "this":
            return This()
        if kind == "member_expression" and not _optional_chain(node):
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None and prop.type == "property_identifier":
                return GetProp(self.expression(obj), self.text(prop))
        elif kind == "call_expression" and not _optional_chain(node):
            callee = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            if callee is not None and arguments is not None and arguments.type == "arguments":
                return Call(self.expression(callee), self.arguments(arguments))
        elif kind == "assignment_expression":
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is not None and right is not None:
                return Assign(self.expression(left), self.expression(right, jsdoc))
        elif kind in ("function_expression", "function"):
            if not any(c.type == "async" for c in node.children):
                return self.function(node, jsdoc)
        return OtherExpr(self.text(node), self.nested_assignments(node))

    def nested_assignments(self, node) -> list:
        """
        Every assignment inside a node we do not model (blocks, conditionals,
        object literals, arrow functions, ...), so that definitions hidden in
        there are still seen. Converted assignments cover their own subtrees.
        """
        found = []
        stack = list(reversed(node.children))
        while stack:
            child = stack.pop()
            if child.type == "assignment_expression":
                converted = self.expression(child)
                if isinstance(converted, Assign):
                    found.append(converted)
                else:
                    found.extend(converted.assignments)
                continue
            stack.extend(reversed(child.children))
        return found

    def arguments(self, node) -> list:
        args = []
        for child in node.named_children:
            if child.type == "comment":
                continue
            if child.type == "spread_element":
                inner = [c for c in child.named_children if c.type != "comment"]
                args.append(Spread(self.expression(inner[0])) if len(inner) == 1
                            else OtherExpr(self.text(child), self.nested_assignments(child)))
            else:
                args.append(self.expression(child))
        return args

    def function(self, node, jsdoc: Optional[JSDocInfo]) -> Function:
        name_node = node.child_by_field_name("name")
        params_node = node.child_by_field_name("parameters")
        body_node = node.child_by_field_name("body")
        params = [self.param(p, jsdoc) for p in params_node.named_children
                  if p.type != "comment"] if params_node is not None else []
        body = self.statements(body_node.children) if body_node is not None else []
        return Function(
            params=params,
            body=body,
            name=self.text(name_node) if name_node is not None else None,
            returns_value=body_node is not None and _returns_value(body_node),
        )

    def param(self, node, jsdoc: Optional[JSDocInfo]) -> Param:
        if node.type == "identifier":
            param = Param(self.text(node))
        elif node.type == "assignment_pattern":
            left = node.child_by_field_name("left")
            return Param(self.text(left if left is not None else node), ParamKind.OPTIONAL,
                         declared=True)
        elif node.type == "rest_pattern":
            inner = [c for c in node.named_children if c.type != "comment"]
            target = inner[0] if len(inner) == 1 else node
            return Param(self.text(target), ParamKind.REST, spread=True, declared=True)
        else:
            # Destructuring patterns keep their source text as the name, which
            # no forwarded identifier can ever equal.
            return Param(self.text(node))

        # Closure conventions, then the JSDoc type (`{T=}` / `{...T}`).
        if param.name.startswith("opt_"):
            param.kind, param.declared = ParamKind.OPTIONAL, True
        elif param.name == "var_args":
            param.kind, param.declared = ParamKind.REST, True
        doc = jsdoc.param(param.name) if jsdoc is not None else None
        if doc is not None:
            param.declared = True
            if doc.is_rest:
                param.kind = ParamKind.REST
            elif doc.is_optional:
                param.kind = ParamKind.OPTIONAL
        return param


def _optional_chain(node) -> bool:
    return any(c.type == "optional_chain" for c in node.children)


def _returns_value(body_node) -> bool:
    """True when the body has a `return <expr>` that is not inside a nested function."""
    stack = list(body_node.children)
    while stack:
        node = stack.pop()
        if node.type in _FUNCTION_TYPES:
            continue
        if node.type == "return_statement":
            if any(c.type != "comment" for c in node.named_children):
                return True
            continue
        stack.extend(node.children)
    return False
