import logging
import os
import re
from typing import Optional, Set

from componentgen.base.types import ComponentInformation, ParsedClassDeclaration
from componentgen.extractors.import_export_reader import WILDCARD, get_export_declarations
from componentgen.resolution.declaration_resolver import INDEX_FILE, DeclarationResolver
from componentgen.utils.file_utils import ignore_spec, visit_jsonld_files

CONTEXT_FILE = "context.jsonld"

logger = logging.getLogger(__name__)


def id_segment(component_id: str) -> str:
    return re.split(r"[/:]", component_id)[-1]


class ComponentLookup:
    def __init__(self, resolver: DeclarationResolver, logger=logger):
        self.resolver = resolver
        self.registry = resolver.registry
        self.logger = logger

    def possible_export_names(self, declaration: ParsedClassDeclaration) -> Set[str]:
        """
        Names the declaration's package exports it under, based on the index file.
        A class may be exported several times under different names.
        """
        names = set()
        index = self.resolver.parse_index(declaration.package_name)
        if not index:
            self.logger.error(index.reason)
            return names
        if declaration.file_path == INDEX_FILE:
            names.add(declaration.class_name)
        exports = get_export_declarations(index.value, self.logger)
        for file, details in exports.items():
            if file != declaration.file_path:
                continue
            for detail in details:
                if detail.class_name == WILDCARD:
                    names.add(declaration.class_name)
                elif detail.class_name == declaration.class_name:
                    names.add(detail.export_name)
        return names

    def find_component(self, exported_name: str, components_path: str) -> Optional[ComponentInformation]:
        # the components index and shared context are never component documents
        ignore = ignore_spec([os.path.basename(components_path), CONTEXT_FILE])
        for file_path, content in visit_jsonld_files(os.path.dirname(components_path), ignore, self.logger):
            if not isinstance(content, dict) or "components" not in content:
                continue
            for component in content["components"]:
                if "requireElement" not in component:
                    self.logger.debug(f"Component {component.get('@id')} is lacking a requireElement key")
                # a missing requireElement can be guessed from the last segment of the @id
                if component.get("requireElement") == exported_name or \
                        id_segment(component.get("@id", "")) == exported_name:
                    return ComponentInformation(component, content)
        return None

    def match_component(self, declaration: ParsedClassDeclaration) -> Optional[ComponentInformation]:
        manifest = self.registry.package_manifest(declaration.package_name)
        if manifest is None:
            self.logger.debug(f"Package {declaration.package_name} was not discovered")
            return None
        module_iri = manifest.get("lsd:module")
        if not module_iri:
            self.logger.debug(f"Skipping package {declaration.package_name} with missing lsd:module attribute")
            return None
        components_path = self.registry.components_path(module_iri)
        if components_path is None:
            self.logger.debug(f"No components file registered for {module_iri}")
            return None
        for name in sorted(self.possible_export_names(declaration)):
            component = self.find_component(name, components_path)
            if component is not None:
                return component
        return None
