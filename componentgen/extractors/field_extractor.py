import logging
from typing import List, Optional

from componentgen.base.types import (
    FieldDeclaration,
    FieldType,
    ImportTable,
    ParameterMetadata,
    ParsedClassDeclaration,
    Position,
)
from componentgen.extractors import ast_utils
from componentgen.extractors.comment_utils import get_comment, get_in_between_comment, parse_field_comment
from componentgen.extractors.import_export_reader import get_import_declarations
from componentgen.extractors.type_utils import convert_type_to_xsd

logger = logging.getLogger(__name__)


class FieldExtractor:
    def __init__(self, resolver, lookup, logger=logger):
        self.resolver = resolver
        self.lookup = lookup
        self.logger = logger

    def extract_field(self, node, declaration: ParsedClassDeclaration, imports: ImportTable,
                      comment_start: Optional[Position] = None) -> Optional[FieldDeclaration]:
        """
        Parses a class field, interface property or constructor parameter.

        When comment_start is given, only a comment between that position and the
        start of the node is considered, so each constructor parameter sees the
        comments in its own slice of the parameter list.
        """
        source = declaration.source
        name = ast_utils.get_member_name(node, source, self.logger)
        if not name:
            self.logger.debug(f"Skipping field without a readable name: {source.get_text(node)}")
            return None

        annotation = ast_utils.get_type_annotation(node, source)
        if comment_start is None:
            comment = get_comment(source.comments, node)
        else:
            comment = get_in_between_comment(source.comments, comment_start, ast_utils.start_position(node))
        parsed = parse_field_comment(comment, annotation, self.logger)
        if parsed.ignored:
            self.logger.debug(f"Field {name} has an ignore attribute, skipping")
            return None

        metadata = ParameterMetadata(
            required=not ast_utils.is_optional(node),
            unique=not isinstance(annotation, ast_utils.ArrayType),
            default=parsed.default,
            comment=parsed.description,
        )
        metadata.range = parsed.range
        if metadata.range is None and annotation is not None:
            metadata.range = convert_type_to_xsd(annotation, log=self.logger)
        if metadata.range is not None:
            return FieldDeclaration(name, FieldType.SIMPLE, metadata)

        if annotation is None:
            self.logger.debug(f"Field {name} has no type annotation, skipping")
            return None
        reference = ast_utils.get_type_reference(annotation, self.logger)
        if reference is None:
            return None
        resolved = self.resolver.resolve_with_context(reference, declaration, imports)
        if not resolved:
            self.logger.debug(f"Could not get declaration of class {reference.class_name}")
            return None
        component = self.lookup.match_component(resolved.value)
        if component is not None:
            metadata.range = component.component.get("@id")
        else:
            self.logger.debug(f"Could not match class {reference.class_name} with any component")
        return FieldDeclaration(name, FieldType.COMPLEX, metadata, resolved.value, component)

    def extract_fields(self, declaration: ParsedClassDeclaration) -> List[FieldDeclaration]:
        imports = get_import_declarations(declaration.source, self.logger)
        if declaration.node.type in ast_utils.CLASS_KINDS:
            member_kind = "public_field_definition"
        else:
            member_kind = "property_signature"
        fields = []
        for member in ast_utils.get_body_members(declaration.node):
            if member.type != member_kind:
                continue
            parsed = self.extract_field(member, declaration, imports)
            if parsed is not None:
                fields.append(parsed)
        return fields

    def extract_constructor_params(self, declaration: ParsedClassDeclaration,
                                   imports: ImportTable) -> List[FieldDeclaration]:
        source = declaration.source
        constructor = ast_utils.find_constructor(declaration.node, source)
        if constructor is None:
            return []
        self.logger.debug(f"Found a constructor for class {declaration.class_name}")
        params = []
        parameters = constructor.child_by_field_name("parameters")
        previous_end = ast_utils.start_position(constructor)
        for param in parameters.named_children if parameters is not None else []:
            if param.type not in ast_utils.PARAMETER_KINDS:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None or pattern.type != "identifier":
                self.logger.error(f"Could not understand parameter type {pattern.type if pattern else param.type}")
                continue
            parsed = self.extract_field(param, declaration, imports, previous_end)
            if parsed is not None:
                params.append(parsed)
            previous_end = ast_utils.end_position(param)
        return params
