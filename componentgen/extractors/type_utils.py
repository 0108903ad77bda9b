import logging
from typing import Optional

from componentgen.extractors.ast_utils import ArrayType, PrimitiveType, TypeNode, TypeReference

# first entry is the range used when inferring
TYPE_TO_XSD = {
    "boolean": ["boolean"],
    "number": ["int", "integer", "number", "byte", "long", "float", "decimal", "double"],
    "string": ["string"],
}

# boxed JavaScript types
JAVASCRIPT_TYPES = {
    "Boolean": "boolean",
    "Number": "number",
    "String": "string",
}

logger = logging.getLogger(__name__)


def _primitive_of(annotation: TypeNode) -> Optional[str]:
    if isinstance(annotation, PrimitiveType):
        return annotation.keyword if annotation.keyword in TYPE_TO_XSD else None
    if isinstance(annotation, TypeReference) and annotation.namespace is None:
        return JAVASCRIPT_TYPES.get(annotation.class_name)
    return None


def is_valid_xsd(annotation: TypeNode, xsd: str, is_array=False, log=logger) -> bool:
    if isinstance(annotation, ArrayType):
        if is_array:
            log.error("Cannot parse nested array types")
            return False
        return is_valid_xsd(annotation.element, xsd, True, log)
    primitive = _primitive_of(annotation)
    return primitive is not None and xsd in TYPE_TO_XSD[primitive]


def convert_type_to_xsd(annotation: TypeNode, is_array=False, log=logger) -> Optional[str]:
    if isinstance(annotation, ArrayType):
        if is_array:
            log.error("Cannot parse nested array types")
            return None
        return convert_type_to_xsd(annotation.element, True, log)
    primitive = _primitive_of(annotation)
    if primitive is None:
        if isinstance(annotation, TypeReference):
            log.debug(f"Could not match type {annotation.class_name} with a JavaScript type")
        return None
    return f"xsd:{TYPE_TO_XSD[primitive][0]}"
