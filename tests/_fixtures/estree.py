"""Builders for ESTree-shaped mappings as the component parser emits them."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable, Optional

Tree = Dict[str, Any]

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def node(type_: str, /, **fields: Any) -> Tree:
    """Positional tag so ESTree fields named ``kind`` pass through."""
    return {"type": type_, **fields}


def at(tree: Tree, line: int, column: int = 0) -> Tree:
    """Attach a ``loc`` so diagnostics carry a position."""
    tree["loc"] = {"start": {"line": line, "column": column}, "end": {"line": line, "column": column}}
    return tree


def ident(name: str) -> Tree:
    return node("Identifier", name=name)


def lit(value: Any, raw: Optional[str] = None) -> Tree:
    if raw is None:
        raw = json.dumps(value) if not isinstance(value, bool) else ("true" if value else "false")
    return node("Literal", value=value, raw=raw)


def template_literal(text: str) -> Tree:
    element = node("TemplateElement", value={"raw": text, "cooked": text}, tail=True)
    return node("TemplateLiteral", quasis=[element], expressions=[])


def _key(key: Any) -> Tree:
    if isinstance(key, dict):
        return key
    if _IDENTIFIER.match(key):
        return ident(key)
    return lit(key)


def prop(key: Any, value: Tree, *, computed: bool = False, kind: str = "init", method: bool = False) -> Tree:
    return node(
        "Property",
        key=_key(key),
        value=value,
        computed=computed,
        kind=kind,
        method=method,
        shorthand=False,
    )


def shorthand(name: str) -> Tree:
    return node("Property", key=ident(name), value=ident(name), computed=False, kind="init", shorthand=True)


def obj(*properties: Tree) -> Tree:
    return node("ObjectExpression", properties=list(properties))


def spread(argument: Tree) -> Tree:
    return node("SpreadElement", argument=argument)


def arr(*elements: Optional[Tree]) -> Tree:
    return node("ArrayExpression", elements=list(elements))


def member(obj_: Any, property_: str) -> Tree:
    target = ident(obj_) if isinstance(obj_, str) else obj_
    return node("MemberExpression", object=target, property=ident(property_), computed=False, optional=False)


def call(callee: Any, *arguments: Tree, type_args: Optional[Tree] = None) -> Tree:
    tree = node("CallExpression", callee=ident(callee) if isinstance(callee, str) else callee, arguments=list(arguments))
    if type_args is not None:
        tree["typeArguments"] = node("TSTypeParameterInstantiation", params=[type_args])
    return tree


def new(callee: str, *arguments: Tree) -> Tree:
    return node("NewExpression", callee=ident(callee), arguments=list(arguments))


def as_expression(expression: Tree, type_name: str = "ComponentOptions") -> Tree:
    return node("TSAsExpression", expression=expression, typeAnnotation=ts_ref(type_name))


# Functions and statements


def block(*statements: Tree) -> Tree:
    return node("BlockStatement", body=list(statements))


def func(*statements: Tree) -> Tree:
    return node("FunctionExpression", id=None, params=[], body=block(*statements))


def arrow(body: Tree) -> Tree:
    return node(
        "ArrowFunctionExpression",
        params=[],
        body=body,
        expression=body["type"] != "BlockStatement",
    )


def func_decl(name: str, *statements: Tree) -> Tree:
    return node("FunctionDeclaration", id=ident(name), params=[], body=block(*statements))


def ret(argument: Optional[Tree] = None) -> Tree:
    return node("ReturnStatement", argument=argument)


def throw(argument: Tree) -> Tree:
    return node("ThrowStatement", argument=argument)


def expr(expression: Tree) -> Tree:
    return node("ExpressionStatement", expression=expression)


def let(name: str, init: Optional[Tree] = None) -> Tree:
    declarator = node("VariableDeclarator", id=ident(name), init=init)
    return node("VariableDeclaration", kind="let", declarations=[declarator])


def if_(test: Tree, consequent: Tree, alternate: Optional[Tree] = None) -> Tree:
    return node("IfStatement", test=test, consequent=consequent, alternate=alternate)


def while_(test: Tree, body: Tree) -> Tree:
    return node("WhileStatement", test=test, body=body)


def do_while(body: Tree, test: Tree) -> Tree:
    return node("DoWhileStatement", body=body, test=test)


def for_(body: Tree, test: Optional[Tree] = None) -> Tree:
    return node("ForStatement", init=None, test=test, update=None, body=body)


def for_of(name: str, iterable: Tree, body: Tree) -> Tree:
    return node("ForOfStatement", left=let(name), right=iterable, body=body, **{"await": False})


def switch(discriminant: Tree, *cases: Tree) -> Tree:
    return node("SwitchStatement", discriminant=discriminant, cases=list(cases))


def case(test: Optional[Tree], *consequent: Tree) -> Tree:
    return node("SwitchCase", test=test, consequent=list(consequent))


def try_(block_: Tree, handler: Optional[Tree] = None, finalizer: Optional[Tree] = None) -> Tree:
    catch = node("CatchClause", param=ident("e"), body=handler) if handler is not None else None
    return node("TryStatement", block=block_, handler=catch, finalizer=finalizer)


def brk(label: Optional[str] = None) -> Tree:
    return node("BreakStatement", label=ident(label) if label else None)


def cont(label: Optional[str] = None) -> Tree:
    return node("ContinueStatement", label=ident(label) if label else None)


def labeled(label: str, body: Tree) -> Tree:
    return node("LabeledStatement", label=ident(label), body=body)


# Modules


def export_default(declaration: Tree) -> Tree:
    return node("ExportDefaultDeclaration", declaration=declaration)


def import_from(source: str, *names: Any) -> Tree:
    """``import { a, b as c } from source``; a tuple entry is ``(imported, local)``."""
    specifiers = []
    for name in names:
        imported, local = name if isinstance(name, tuple) else (name, name)
        specifiers.append(node("ImportSpecifier", imported=ident(imported), local=ident(local)))
    return node("ImportDeclaration", source=lit(source), specifiers=specifiers)


def program(*body: Tree, comments: Iterable[str] = (), template: Optional[Tree] = None) -> Tree:
    tree = node(
        "Program",
        sourceType="module",
        body=list(body),
        comments=[node("Block", value=value) for value in comments],
    )
    if template is not None:
        tree["templateBody"] = template
    return tree


def component(*options: Tree) -> Tree:
    """``export default { ...options }`` as a whole program."""
    return program(export_default(obj(*options)))


# TypeScript


def ts(keyword: str) -> Tree:
    return node(f"TS{keyword[0].upper()}{keyword[1:]}Keyword")


def ts_ref(name: str) -> Tree:
    return node("TSTypeReference", typeName=ident(name))


def ts_union(*types: Tree) -> Tree:
    return node("TSUnionType", types=list(types))


def ts_literal(value: Any) -> Tree:
    return node("TSLiteralType", literal=lit(value))


def ts_member(name: str, annotation: Tree, *, optional: bool = False) -> Tree:
    return node(
        "TSPropertySignature",
        key=ident(name),
        computed=False,
        optional=optional,
        typeAnnotation=node("TSTypeAnnotation", typeAnnotation=annotation),
    )


def ts_type_literal(*members: Tree) -> Tree:
    return node("TSTypeLiteral", members=list(members))


def ts_intersection(*types: Tree) -> Tree:
    return node("TSIntersectionType", types=list(types))


def interface(name: str, *members: Tree, extends: Iterable[str] = ()) -> Tree:
    return node(
        "TSInterfaceDeclaration",
        id=ident(name),
        body=node("TSInterfaceBody", body=list(members)),
        extends=[node("TSInterfaceHeritage", expression=ident(parent)) for parent in extends],
    )


def type_alias(name: str, annotation: Tree) -> Tree:
    return node("TSTypeAliasDeclaration", id=ident(name), typeAnnotation=annotation)


def define_props_typed(type_argument: Tree) -> Tree:
    return call("defineProps", type_args=type_argument)
