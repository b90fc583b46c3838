"""Canonicalize prop and computed declarations across declaration idioms.

Components declare props and computed getters in several shapes:

* an options object (``export default { props: {...}, computed: {...} }``),
* a composition call (``defineProps({...})``, ``computed(() => ...)``),
* a type-only call (``defineProps<Props>()``),
* a type-only call wrapped in ``withDefaults(defineProps<Props>(), {...})``.

``iter_components`` walks a program once and yields one
:class:`~sfclint.models.ComponentDeclaration` per definition site.  Shapes that
are not recognized produce nothing; the analyzers never see them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from .logging import get_logger
from .models import (
    UNKNOWN,
    ComponentDeclaration,
    ComputedGetter,
    DeclarationStyle,
    DeclaredType,
    DynamicName,
    GetterOptions,
    PropertyDeclaration,
    PropName,
    StaticName,
    TypeExpr,
)
from .tree import Node, static_property_name, static_string, unwrap_type_assertion, wrapping_parent

logger = get_logger("normalizer")

NATIVE_TYPES = frozenset(
    {"String", "Number", "Boolean", "Function", "Object", "Array", "Symbol", "BigInt", "Date", "Promise"}
)
COMPOSITION_SOURCES = frozenset({"vue", "@vue/composition-api", "@vue/runtime-core"})

_FUNCTION_KINDS = frozenset({"FunctionExpression", "ArrowFunctionExpression"})
_OPAQUE_VALUE_KINDS = frozenset({"CallExpression", "MemberExpression", "ChainExpression", "NewExpression"})
_COMPONENT_MARKER = "@vue/component"
_MAX_TYPE_DEPTH = 16

_TS_KEYWORD_TYPES = {
    "TSStringKeyword": "String",
    "TSNumberKeyword": "Number",
    "TSBooleanKeyword": "Boolean",
    "TSBigIntKeyword": "BigInt",
    "TSSymbolKeyword": "Symbol",
    "TSObjectKeyword": "Object",
    "TSFunctionType": "Function",
    "TSConstructorType": "Function",
    "TSArrayType": "Array",
    "TSTupleType": "Array",
    "TSTypeLiteral": "Object",
    "TSMappedType": "Object",
    "TSTemplateLiteralType": "String",
}
_TS_NULLISH_TYPES = frozenset({"TSUndefinedKeyword", "TSNullKeyword", "TSVoidKeyword"})


@dataclass(frozen=True)
class _ScriptContext:
    component_file: bool
    computed_aliases: FrozenSet[str]
    type_declarations: Dict[str, Node]
    getter_options: GetterOptions


_Recognizer = Callable[[Node, _ScriptContext], Optional[ComponentDeclaration]]


def iter_components(
    program: Node,
    *,
    filename: Optional[str] = None,
    getter_options: Optional[GetterOptions] = None,
) -> Iterator[ComponentDeclaration]:
    """Yield canonical declarations for every definition site in ``program``."""
    context = _build_context(program, filename, getter_options or GetterOptions())
    composition_getters: List[ComputedGetter] = []

    for node in _iter_script_nodes(program):
        for recognizer in _RECOGNIZERS.get(node.kind, ()):
            declaration = recognizer(node, context)
            if declaration is not None:
                yield declaration
                break
        if node.kind == "CallExpression":
            getter = _composition_getter(node, context)
            if getter is not None:
                composition_getters.append(getter)

    if composition_getters:
        yield ComponentDeclaration(
            node=program,
            props_style=None,
            computed_style=DeclarationStyle.COMPOSITION_CALL,
            computed=tuple(composition_getters),
        )


def iter_props(program: Node, *, filename: Optional[str] = None) -> Iterator[PropertyDeclaration]:
    for component in iter_components(program, filename=filename):
        yield from component.props


def iter_computed(
    program: Node,
    *,
    filename: Optional[str] = None,
    getter_options: Optional[GetterOptions] = None,
) -> Iterator[ComputedGetter]:
    for component in iter_components(program, filename=filename, getter_options=getter_options):
        yield from component.computed


# Context


def _build_context(program: Node, filename: Optional[str], getter_options: GetterOptions) -> _ScriptContext:
    aliases = {"computed"}
    type_declarations: Dict[str, Node] = {}
    for statement in program.field("body", ()):
        if statement.kind == "ImportDeclaration":
            _collect_computed_imports(statement, aliases)
            continue
        declaration = statement
        if statement.kind in {"ExportNamedDeclaration", "ExportDefaultDeclaration"}:
            declaration = statement.field("declaration")
        if declaration is not None and declaration.kind in {"TSInterfaceDeclaration", "TSTypeAliasDeclaration"}:
            identifier = declaration.field("id")
            if identifier is not None and identifier.kind == "Identifier":
                type_declarations[identifier.field("name")] = declaration

    return _ScriptContext(
        component_file=_is_component_file(program, filename),
        computed_aliases=frozenset(aliases),
        type_declarations=type_declarations,
        getter_options=getter_options,
    )


def _collect_computed_imports(statement: Node, aliases: Set[str]) -> None:
    source = static_string(statement.field("source"))
    for specifier in statement.field("specifiers", ()):
        local = specifier.field("local")
        local_name = local.field("name") if local is not None else None
        if source in COMPOSITION_SOURCES:
            imported = specifier.field("imported")
            if specifier.kind == "ImportSpecifier" and imported is not None and _identifier_or_string(imported) == "computed":
                aliases.add(local_name)
        elif local_name == "computed":
            # A foreign `computed` shadows the framework helper.
            aliases.discard("computed")


def _identifier_or_string(node: Node) -> Optional[str]:
    if node.kind == "Identifier":
        return node.field("name")
    return static_string(node)


def _is_component_file(program: Node, filename: Optional[str]) -> bool:
    if filename is None or filename.endswith((".vue", ".jsx")):
        return True
    for comment in program.field("comments", ()) or ():
        value = comment.field("value")
        if isinstance(value, str) and _COMPONENT_MARKER in value:
            return True
    return False


def _iter_script_nodes(program: Node) -> Iterator[Node]:
    for statement in program.field("body", ()):
        yield statement
        yield from statement.iter_descendants()


# Recognizers, tried in priority order per node kind


def _recognize_type_only_with_defaults(node: Node, context: _ScriptContext) -> Optional[ComponentDeclaration]:
    if not _is_call_to(node, "withDefaults"):
        return None
    arguments = node.field("arguments", ())
    if not arguments:
        return None
    inner = unwrap_type_assertion(arguments[0])
    if inner is None or not _is_type_only_define_props(inner):
        return None
    defaults = unwrap_type_assertion(arguments[1]) if len(arguments) > 1 else None
    default_keys = _static_keys(defaults) if defaults is not None else frozenset()
    props = _props_from_type(inner, context, default_keys, DeclarationStyle.TYPE_ONLY_WITH_DEFAULTS)
    return ComponentDeclaration(
        node=node,
        props_style=DeclarationStyle.TYPE_ONLY_WITH_DEFAULTS,
        computed_style=None,
        props=props,
    )


def _recognize_type_only(node: Node, context: _ScriptContext) -> Optional[ComponentDeclaration]:
    if not _is_type_only_define_props(node):
        return None
    parent = wrapping_parent(node)
    if parent is not None and _is_call_to(parent, "withDefaults"):
        return None
    props = _props_from_type(node, context, None, DeclarationStyle.TYPE_ONLY_INTERFACE)
    return ComponentDeclaration(
        node=node,
        props_style=DeclarationStyle.TYPE_ONLY_INTERFACE,
        computed_style=None,
        props=props,
    )


def _recognize_define_props_call(node: Node, context: _ScriptContext) -> Optional[ComponentDeclaration]:
    if not _is_call_to(node, "defineProps"):
        return None
    arguments = node.field("arguments", ())
    if len(arguments) != 1:
        return None
    value = unwrap_type_assertion(arguments[0])
    props = _props_from_value(value, DeclarationStyle.COMPOSITION_CALL)
    if props is None:
        logger.debug("Skipping defineProps() with %s argument", value.kind if value else "no")
        return None
    return ComponentDeclaration(
        node=node,
        props_style=DeclarationStyle.COMPOSITION_CALL,
        computed_style=None,
        props=props,
    )


def _recognize_options_object(node: Node, context: _ScriptContext) -> Optional[ComponentDeclaration]:
    if not _is_component_definition(node, context):
        return None
    props_entry = _find_property(node, "props")
    computed_entry = _find_property(node, "computed")
    if props_entry is None and computed_entry is None:
        return None

    props: Tuple[PropertyDeclaration, ...] = ()
    if props_entry is not None:
        value = unwrap_type_assertion(props_entry.field("value"))
        props = _props_from_value(value, DeclarationStyle.OPTIONS_OBJECT) or ()

    computed: Tuple[ComputedGetter, ...] = ()
    if computed_entry is not None:
        value = unwrap_type_assertion(computed_entry.field("value"))
        if value is not None and value.kind == "ObjectExpression":
            computed = tuple(_options_getters(value, context))
        else:
            logger.debug("Skipping computed option of kind %s", value.kind if value else None)

    return ComponentDeclaration(
        node=node,
        props_style=DeclarationStyle.OPTIONS_OBJECT if props_entry is not None else None,
        computed_style=DeclarationStyle.OPTIONS_OBJECT if computed_entry is not None else None,
        props=props,
        computed=computed,
    )


_RECOGNIZERS: Dict[str, Tuple[_Recognizer, ...]] = {
    "CallExpression": (
        _recognize_type_only_with_defaults,
        _recognize_type_only,
        _recognize_define_props_call,
    ),
    "ObjectExpression": (_recognize_options_object,),
}


# Shape predicates


def _is_call_to(node: Node, name: str) -> bool:
    if node.kind != "CallExpression":
        return False
    callee = node.field("callee")
    return callee is not None and callee.kind == "Identifier" and callee.field("name") == name


def _type_argument(node: Node) -> Optional[Node]:
    instantiation = node.field("typeArguments") or node.field("typeParameters")
    if instantiation is None:
        return None
    params = instantiation.field("params", ())
    return params[0] if params else None


def _is_type_only_define_props(node: Node) -> bool:
    return (
        _is_call_to(node, "defineProps")
        and not node.field("arguments", ())
        and _type_argument(node) is not None
    )


def _is_component_definition(node: Node, context: _ScriptContext) -> bool:
    parent = wrapping_parent(node)
    if parent is None:
        return False

    if parent.kind == "ExportDefaultDeclaration":
        return context.component_file

    arguments = parent.field("arguments", ())
    if not arguments or not any(unwrap_type_assertion(arg) is node for arg in arguments):
        return False
    first = unwrap_type_assertion(arguments[0]) is node
    last = unwrap_type_assertion(arguments[-1]) is node
    callee = unwrap_type_assertion(parent.field("callee"))
    if callee is None:
        return False

    if parent.kind == "NewExpression":
        return first and callee.kind == "Identifier" and callee.field("name") == "Vue"
    if parent.kind != "CallExpression":
        return False
    if callee.kind == "Identifier":
        return first and callee.field("name") == "defineComponent"
    if callee.kind == "MemberExpression" and not callee.field("computed"):
        owner = unwrap_type_assertion(callee.field("object"))
        method = callee.field("property")
        if owner is None or owner.kind != "Identifier" or owner.field("name") != "Vue":
            return False
        method_name = method.field("name") if method is not None else None
        if method_name in {"extend", "mixin"}:
            return first
        if method_name == "component":
            return last and len(arguments) == 2
    return False


def _find_property(obj: Node, name: str) -> Optional[Node]:
    for entry in obj.field("properties", ()):
        if entry.kind == "Property" and static_property_name(entry) == name:
            return entry
    return None


def _static_keys(node: Node) -> Optional[FrozenSet[str]]:
    """Static keys of an object literal, or None when they cannot be known."""
    if node.kind != "ObjectExpression":
        return None
    keys = set()
    for entry in node.field("properties", ()):
        if entry.kind != "Property":
            return None
        name = static_property_name(entry)
        if name is None:
            return None
        keys.add(name)
    return frozenset(keys)


def _prop_name(entry: Node) -> PropName:
    name = static_property_name(entry)
    if name is not None:
        return StaticName(name)
    return DynamicName(entry.field("key").text)


# Props


def _props_from_value(value: Optional[Node], style: DeclarationStyle) -> Optional[Tuple[PropertyDeclaration, ...]]:
    if value is None:
        return None
    if value.kind == "ObjectExpression":
        return tuple(_props_from_object(value, style))
    if value.kind == "ArrayExpression":
        return tuple(_props_from_array(value, style))
    return None


def _props_from_object(obj: Node, style: DeclarationStyle) -> Iterator[PropertyDeclaration]:
    for entry in obj.field("properties", ()):
        if entry.kind != "Property":
            logger.debug("Skipping %s in props declaration", entry.kind)
            continue
        if entry.field("shorthand"):
            continue
        value = unwrap_type_assertion(entry.field("value"))
        declared_type, has_default, required = _classify_prop_value(value)
        yield PropertyDeclaration(
            name=_prop_name(entry),
            declared_type=declared_type,
            has_default=has_default,
            node=entry,
            style=style,
            required=required,
        )


def _props_from_array(array: Node, style: DeclarationStyle) -> Iterator[PropertyDeclaration]:
    for element in array.field("elements", ()):
        if element is None:
            continue
        name = static_string(element)
        yield PropertyDeclaration(
            name=StaticName(name) if name is not None else DynamicName(element.text),
            declared_type=UNKNOWN,
            has_default=False,
            node=element,
            style=style,
            from_array=True,
        )


def _classify_prop_value(value: Optional[Node]) -> Tuple[DeclaredType, bool, bool]:
    """Return ``(declared_type, has_default, required)`` for one prop value."""
    if value is None:
        return UNKNOWN, False, False
    if value.kind == "ObjectExpression":
        type_entry = _find_property(value, "type")
        declared = _runtime_type(unwrap_type_assertion(type_entry.field("value"))) if type_entry else UNKNOWN
        # A spread may carry the default from elsewhere.
        has_default = _find_property(value, "default") is not None or any(
            entry.kind == "SpreadElement" for entry in value.field("properties", ())
        )
        required_entry = _find_property(value, "required")
        required = bool(
            required_entry is not None
            and required_entry.field("value") is not None
            and required_entry.field("value").kind == "Literal"
            and required_entry.field("value").field("value") is True
        )
        return declared, has_default, required
    if value.kind == "Identifier":
        if value.field("name") in NATIVE_TYPES:
            return TypeExpr((value.field("name"),)), False, False
        # Variable of unknown origin: its default cannot be inspected.
        return UNKNOWN, True, False
    if value.kind == "ArrayExpression":
        return _runtime_type(value), False, False
    if value.kind in _OPAQUE_VALUE_KINDS:
        return UNKNOWN, True, False
    return UNKNOWN, False, False


def _runtime_type(node: Optional[Node]) -> DeclaredType:
    if node is None:
        return UNKNOWN
    if node.kind == "Identifier":
        return TypeExpr((node.field("name"),))
    if node.kind == "ArrayExpression":
        names = []
        for element in node.field("elements", ()):
            if element is None:
                continue
            names.append(element.field("name") if element.kind == "Identifier" else element.text)
        return TypeExpr(tuple(names))
    return UNKNOWN


# Type-only props


def _props_from_type(
    call: Node,
    context: _ScriptContext,
    default_keys: Optional[FrozenSet[str]],
    style: DeclarationStyle,
) -> Tuple[PropertyDeclaration, ...]:
    """Build declarations from the members of ``defineProps<T>()``.

    Under ``withDefaults`` a member has a default iff its name is among
    ``default_keys``; ``default_keys`` of None means the defaults object could
    not be read and every member is taken as satisfied.  Without the wrapper
    only optional members are satisfied.
    """
    members = _resolve_members(_type_argument(call), context, 0)
    if members is None:
        logger.debug("Could not resolve type argument of defineProps() at line %s", call.line)
        return ()

    with_defaults = style is DeclarationStyle.TYPE_ONLY_WITH_DEFAULTS
    declarations = []
    for member in members:
        if member.kind not in {"TSPropertySignature", "TSMethodSignature"}:
            continue
        optional = bool(member.field("optional"))
        name = _prop_name(member)
        if with_defaults:
            has_default = default_keys is None or (isinstance(name, StaticName) and name.value in default_keys)
        else:
            has_default = optional
        declarations.append(
            PropertyDeclaration(
                name=name,
                declared_type=_member_type(member),
                has_default=has_default,
                node=member,
                style=style,
                required=not optional,
            )
        )
    return tuple(declarations)


def _resolve_members(node: Optional[Node], context: _ScriptContext, depth: int) -> Optional[List[Node]]:
    if node is None or depth > _MAX_TYPE_DEPTH:
        return None
    if node.kind == "TSTypeLiteral":
        return list(node.field("members", ()))
    if node.kind == "TSIntersectionType":
        members: List[Node] = []
        for part in node.field("types", ()):
            resolved = _resolve_members(part, context, depth + 1)
            if resolved is None:
                return None
            members.extend(resolved)
        return members
    if node.kind == "TSTypeReference":
        type_name = node.field("typeName")
        if type_name is None or type_name.kind != "Identifier":
            return None
        return _resolve_named(type_name.field("name"), context, depth + 1)
    return None


def _resolve_named(name: str, context: _ScriptContext, depth: int) -> Optional[List[Node]]:
    declaration = context.type_declarations.get(name)
    if declaration is None or depth > _MAX_TYPE_DEPTH:
        return None
    if declaration.kind == "TSTypeAliasDeclaration":
        return _resolve_members(declaration.field("typeAnnotation"), context, depth + 1)
    members: List[Node] = []
    for heritage in declaration.field("extends", ()) or ():
        expression = heritage.field("expression")
        if expression is None or expression.kind != "Identifier":
            continue
        # Members inherited from types outside this file stay invisible.
        members.extend(_resolve_named(expression.field("name"), context, depth + 1) or ())
    body = declaration.field("body")
    if body is not None:
        members.extend(body.field("body", ()))
    return members


def _member_type(member: Node) -> DeclaredType:
    if member.kind == "TSMethodSignature":
        return TypeExpr(("Function",))
    annotation = member.field("typeAnnotation")
    if annotation is None:
        return UNKNOWN
    names = _ts_runtime_types(annotation.field("typeAnnotation"))
    return TypeExpr(names) if names else UNKNOWN


def _ts_runtime_types(node: Optional[Node], depth: int = 0) -> Tuple[str, ...]:
    if node is None or depth > _MAX_TYPE_DEPTH:
        return ()
    kind = node.kind
    if kind in _TS_KEYWORD_TYPES:
        return (_TS_KEYWORD_TYPES[kind],)
    if kind in _TS_NULLISH_TYPES:
        return ()
    if kind == "TSLiteralType":
        literal = node.field("literal")
        value = literal.field("value") if literal is not None else None
        if isinstance(value, bool):
            return ("Boolean",)
        if isinstance(value, str) or (literal is not None and literal.kind == "TemplateLiteral"):
            return ("String",)
        if isinstance(value, (int, float)):
            return ("Number",)
        return ()
    if kind == "TSUnionType":
        names: List[str] = []
        for part in node.field("types", ()):
            for name in _ts_runtime_types(part, depth + 1):
                if name not in names:
                    names.append(name)
        return tuple(names)
    if kind in {"TSParenthesizedType", "TSOptionalType"}:
        return _ts_runtime_types(node.field("typeAnnotation"), depth + 1)
    if kind == "TSTypeReference":
        type_name = node.field("typeName")
        if type_name is None:
            return ()
        name = type_name.field("name") if type_name.kind == "Identifier" else type_name.text
        if name in {"Array", "ReadonlyArray"}:
            return ("Array",)
        if name in {"Record", "Partial", "Readonly", "Required", "Pick", "Omit"}:
            return ("Object",)
        return (name,)
    return ()


# Computed getters


def _options_getters(obj: Node, context: _ScriptContext) -> Iterator[ComputedGetter]:
    for entry in obj.field("properties", ()):
        if entry.kind != "Property" or entry.field("kind") == "set":
            continue
        name = _prop_name(entry).display
        function = _getter_function(unwrap_type_assertion(entry.field("value")))
        if function is None:
            logger.debug("Skipping computed entry %s with opaque value", name)
            continue
        yield ComputedGetter(
            owner_name=name,
            body=function.field("body"),
            node=function,
            options=context.getter_options,
        )


def _composition_getter(node: Node, context: _ScriptContext) -> Optional[ComputedGetter]:
    callee = node.field("callee")
    if callee is None or callee.kind != "Identifier" or callee.field("name") not in context.computed_aliases:
        return None
    arguments = node.field("arguments", ())
    if not arguments:
        return None
    function = _getter_function(unwrap_type_assertion(arguments[0]))
    if function is None:
        return None
    return ComputedGetter(
        owner_name=None,
        body=function.field("body"),
        node=function,
        options=context.getter_options,
    )


def _getter_function(value: Optional[Node]) -> Optional[Node]:
    """Return the getter function of a computed definition value."""
    if value is None:
        return None
    if value.kind in _FUNCTION_KINDS:
        return value
    if value.kind == "ObjectExpression":
        get_entry = _find_property(value, "get")
        if get_entry is not None:
            getter = unwrap_type_assertion(get_entry.field("value"))
            if getter is not None and getter.kind in _FUNCTION_KINDS:
                return getter
    return None


__all__ = [
    "COMPOSITION_SOURCES",
    "NATIVE_TYPES",
    "iter_components",
    "iter_computed",
    "iter_props",
]
