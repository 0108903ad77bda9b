"""
Accessors over tree-sitter TypeScript trees.

Type annotations are read into a small closed set of variants
(PrimitiveType, TypeReference, ArrayType, UnsupportedType) so the rest of
the package never has to look at raw node kinds.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from componentgen.base.types import ClassReference, ParsedSource

CLASS_KINDS = ("class_declaration", "abstract_class_declaration")
INTERFACE_KIND = "interface_declaration"
DECLARATION_KINDS = CLASS_KINDS + (INTERFACE_KIND,)
PARAMETER_KINDS = ("required_parameter", "optional_parameter")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrimitiveType:
    keyword: str


@dataclass(frozen=True)
class TypeReference:
    class_name: str
    namespace: Optional[str] = None


@dataclass(frozen=True)
class ArrayType:
    element: "TypeNode"


@dataclass(frozen=True)
class UnsupportedType:
    kind: str


TypeNode = Union[PrimitiveType, TypeReference, ArrayType, UnsupportedType]


def read_type(node, source: ParsedSource) -> TypeNode:
    if node.type == "type_annotation":
        inner = node.named_children[0] if node.named_children else None
        if inner is None:
            return UnsupportedType("empty")
        return read_type(inner, source)
    if node.type in ("parenthesized_type", "readonly_type"):
        inner = node.named_children[-1] if node.named_children else None
        return read_type(inner, source) if inner is not None else UnsupportedType(node.type)
    if node.type == "predefined_type":
        return PrimitiveType(source.get_text(node))
    if node.type == "type_identifier":
        return TypeReference(source.get_text(node))
    if node.type == "nested_type_identifier":
        module = node.child_by_field_name("module")
        name = node.child_by_field_name("name")
        if module is None or name is None or module.type != "identifier":
            return UnsupportedType(node.type)
        return TypeReference(source.get_text(name), source.get_text(module))
    if node.type == "generic_type":
        name = node.child_by_field_name("name")
        if name is None:
            return UnsupportedType(node.type)
        return read_type(name, source)
    if node.type == "array_type":
        element = node.named_children[0] if node.named_children else None
        if element is None:
            return UnsupportedType(node.type)
        return ArrayType(read_type(element, source))
    return UnsupportedType(node.type)


def get_type_annotation(node, source: ParsedSource) -> Optional[TypeNode]:
    annotation = node.child_by_field_name("type")
    if annotation is None:
        return None
    return read_type(annotation, source)


def get_type_reference(annotation: TypeNode, log=logger, is_array=False) -> Optional[ClassReference]:
    """Class referenced by a type annotation, looking through one level of array."""
    if isinstance(annotation, TypeReference):
        return ClassReference(annotation.class_name, annotation.namespace)
    if isinstance(annotation, ArrayType):
        if is_array:
            log.error("Cannot parse nested array types")
            return None
        return get_type_reference(annotation.element, log, True)
    if isinstance(annotation, PrimitiveType):
        log.error(f"Could not recognize annotation type {annotation.keyword}")
    else:
        log.error(f"Could not recognize annotation type {annotation.kind}")
    return None


def declaration_name(node, source: ParsedSource) -> Optional[str]:
    name = node.child_by_field_name("name")
    return source.get_text(name) if name is not None else None


def is_abstract(node) -> bool:
    return node.type == "abstract_class_declaration"


def unwrap_declaration(node):
    """The class or interface declared by an export statement, if any."""
    if node is None:
        return None
    if node.type == "ambient_declaration":
        for c in node.named_children:
            if c.type in DECLARATION_KINDS:
                return c
        return None
    return node if node.type in DECLARATION_KINDS else None


def iter_exported_declarations(source: ParsedSource, log=logger) -> Iterator:
    for statement in source.root.named_children:
        if statement.type != "export_statement":
            continue
        if any(c.type == "default" for c in statement.children):
            continue
        declaration = statement.child_by_field_name("declaration")
        if declaration is None:
            log.debug("Can not parse non-declaration export")
            continue
        declaration = unwrap_declaration(declaration)
        if declaration is not None:
            yield declaration


def find_exported_declaration(source: ParsedSource, class_name: str, log=logger):
    for declaration in iter_exported_declarations(source, log):
        if declaration_name(declaration, source) == class_name:
            return declaration
    return None


def get_super_class(node, source: ParsedSource, log=logger) -> Optional[ClassReference]:
    """Reference to the superclass of a class, or the first parent of an interface."""
    if node.type in CLASS_KINDS:
        value = None
        for c in node.children:
            if c.type == "class_heritage":
                for cc in c.children:
                    if cc.type == "extends_clause":
                        value = cc.child_by_field_name("value")
        if value is None:
            return None
        if value.type == "identifier":
            return ClassReference(source.get_text(value))
        if value.type == "member_expression":
            obj = value.child_by_field_name("object")
            prop = value.child_by_field_name("property")
            if obj is None or obj.type != "identifier":
                log.error(f"Could not recognize expression {source.get_text(value)} object type {obj.type if obj else None}")
                return None
            if prop is None or prop.type != "property_identifier":
                log.error(f"Could not recognize expression {source.get_text(value)} property type {prop.type if prop else None}")
                return None
            return ClassReference(source.get_text(prop), source.get_text(obj))
        log.error(f"Could not recognize identifier {source.get_text(value)} for the superclass")
        return None

    if node.type == INTERFACE_KIND:
        for c in node.children:
            if c.type == "extends_type_clause":
                parents = c.children_by_field_name("type")
                if not parents:
                    return None
                parent = read_type(parents[0], source)
                if isinstance(parent, TypeReference):
                    return ClassReference(parent.class_name, parent.namespace)
                log.error(f"Could not recognize identifier {source.get_text(parents[0])} for the superclass")
                return None
    return None


def get_body_members(node):
    body = node.child_by_field_name("body")
    return body.named_children if body is not None else []


def find_constructor(node, source: ParsedSource):
    for member in get_body_members(node):
        if member.type in ("method_definition", "method_signature"):
            if declaration_name(member, source) == "constructor":
                return member
    return None


def get_member_name(node, source: ParsedSource, log=logger) -> Optional[str]:
    """Name of a field, property signature or constructor parameter; None for computed keys."""
    if node.type in PARAMETER_KINDS:
        pattern = node.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "identifier":
            return source.get_text(pattern)
        return None
    name = node.child_by_field_name("name")
    if name is None:
        return None
    if name.type in ("property_identifier", "identifier"):
        return source.get_text(name)
    log.debug(f"Could not understand type {name.type}, skipping")
    return None


def is_optional(node) -> bool:
    return node.type == "optional_parameter" or any(c.type == "?" for c in node.children)


def start_position(node):
    return (node.start_point[0] + 1, node.start_point[1])


def end_position(node):
    return (node.end_point[0] + 1, node.end_point[1])
