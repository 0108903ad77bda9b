"""
Finds the file and declaration node of a class or interface.

A class can be declared in the file that references it, imported from a
relative path inside the same package, or imported from another package,
in which case that package's index file and (possibly wildcard) re-exports
are followed to the file that actually declares it.
"""
import logging
import os
import posixpath
from typing import Optional

from componentgen.base.results import Found, NotFound, Resolution
from componentgen.base.tree_parser import SourceSyntaxError
from componentgen.base.types import (
    ClassReference,
    ExportReference,
    ImportTable,
    ParsedClassDeclaration,
    ParsedSource,
)
from componentgen.extractors import ast_utils
from componentgen.extractors.import_export_reader import WILDCARD, get_export_declarations
from componentgen.extractors.typescript_parser import TypeScriptTreeParser
from componentgen.resolution.package_discovery import ModuleRegistry
from componentgen.utils.file_utils import find_typescript_file, is_local_file

INDEX_FILE = "index"

logger = logging.getLogger(__name__)


def find_exported_class(reference: ClassReference, imports: ImportTable) -> Optional[ExportReference]:
    """Translates how a class is referenced in a file into where it is exported from."""
    for module, declarations in imports.items():
        for declaration in declarations:
            if reference.namespace:
                # `q.B` with `import * as q`
                if declaration.class_name == WILDCARD and declaration.import_name == reference.namespace:
                    return ExportReference(reference.class_name, module)
            elif declaration.import_name == reference.class_name:
                return ExportReference(declaration.class_name, module)
    return None


class DeclarationResolver:
    def __init__(self, registry: ModuleRegistry, parser=None, logger=logger):
        self.registry = registry
        self.parser = parser or TypeScriptTreeParser()
        self.logger = logger

    def _parse(self, path_without_extension: str, label: str) -> Resolution[ParsedSource]:
        file_path = find_typescript_file(path_without_extension)
        if file_path is None:
            return NotFound(f"Could not find typescript file at {path_without_extension}")
        try:
            return Found(self.parser.parse_file(file_path))
        except SourceSyntaxError as e:
            return NotFound(f"Could not parse file {label}, invalid syntax at line {e.line}, column {e.column}. Message: {e}")

    def package_root(self, package_name: str) -> Resolution[str]:
        root = self.registry.package_root(package_name)
        if root is None:
            return NotFound(f"Could not find root directory of package {package_name}")
        return Found(root)

    def parse_index(self, package_name: str) -> Resolution[ParsedSource]:
        root = self.package_root(package_name)
        if not root:
            return root
        parsed = self._parse(os.path.join(root.value, INDEX_FILE), f"index of {package_name}")
        if not parsed:
            return NotFound(f"Could not read the index file of {package_name}: {parsed.reason}")
        return parsed

    def resolve_exported(self, reference: ExportReference) -> Resolution[ParsedClassDeclaration]:
        """Searches a package's public exports for a class or interface."""
        index = self.parse_index(reference.exported_from)
        if not index:
            self.logger.error(index.reason)
            return index
        root = self.registry.package_root(reference.exported_from)
        declaration = ast_utils.find_exported_declaration(index.value, reference.class_name, self.logger)
        if declaration is not None:
            self.logger.debug(f"Found matching class for {reference.class_name} in the index of {reference.exported_from}")
            return Found(ParsedClassDeclaration(
                source=index.value,
                node=declaration,
                file_path=INDEX_FILE,
                package_name=reference.exported_from,
                class_name=reference.class_name,
            ))
        exports = get_export_declarations(index.value, self.logger)

        for file, details in exports.items():
            # a class exported as {A as B} and {A as C} must be searched under both names
            search_names = set()
            for detail in details:
                if detail.class_name == WILDCARD or detail.export_name == reference.class_name:
                    search_names.add(detail.class_name)
            if not search_names:
                self.logger.debug(f"Did not find a matching class in {file}")
                continue
            self.logger.debug(f"Found potential file {file} with exported declarations {', '.join(sorted(search_names))}")
            parsed = self._parse(os.path.join(root, file), file)
            if not parsed:
                self.logger.error(parsed.reason)
                continue
            for declaration in ast_utils.iter_exported_declarations(parsed.value, self.logger):
                name = ast_utils.declaration_name(declaration, parsed.value)
                if (WILDCARD in search_names and name == reference.class_name) or name in search_names:
                    self.logger.debug(f"Found matching class for {reference.class_name} on line {declaration.start_point[0] + 1} in {file}")
                    return Found(ParsedClassDeclaration(
                        source=parsed.value,
                        node=declaration,
                        file_path=file,
                        package_name=reference.exported_from,
                        class_name=name,
                    ))
            self.logger.debug(f"Did not find a matching exported class in {file} for name {reference.class_name}")

        reason = f"Did not find an exported declaration of {reference.class_name} in package {reference.exported_from}"
        self.logger.error(reason)
        return NotFound(reason)

    def resolve_local(self, internal_name: str, relative_path: str, package_name: str,
                      from_file: str) -> Resolution[ParsedClassDeclaration]:
        """Searches a file of a package, given the relative path it was imported with."""
        root = self.package_root(package_name)
        if not root:
            self.logger.error(root.reason)
            return root
        normalized = posixpath.normpath(posixpath.join(posixpath.dirname(from_file), relative_path))
        parsed = self._parse(os.path.join(root.value, normalized), normalized)
        if not parsed:
            self.logger.error(parsed.reason)
            return parsed
        declaration = ast_utils.find_exported_declaration(parsed.value, internal_name, self.logger)
        if declaration is None:
            reason = f"Did not find an exported declaration of {internal_name} in {normalized}"
            self.logger.error(reason)
            return NotFound(reason)
        self.logger.debug(f"Found matching class for {internal_name} on line {declaration.start_point[0] + 1}")
        return Found(ParsedClassDeclaration(
            source=parsed.value,
            node=declaration,
            file_path=normalized,
            package_name=package_name,
            class_name=internal_name,
        ))

    def resolve_with_context(self, reference: ClassReference, context: ParsedClassDeclaration,
                             context_imports: ImportTable) -> Resolution[ParsedClassDeclaration]:
        # declarations in the same file never appear in the import table
        if not reference.namespace:
            declaration = ast_utils.find_exported_declaration(context.source, reference.class_name, self.logger)
            if declaration is not None:
                self.logger.debug(f"Found matching class for {reference.class_name} on line {declaration.start_point[0] + 1}")
                return Found(ParsedClassDeclaration(
                    source=context.source,
                    node=declaration,
                    file_path=context.file_path,
                    package_name=context.package_name,
                    class_name=reference.class_name,
                ))

        exported = find_exported_class(reference, context_imports)
        if exported is None:
            reason = f"Could not find declaration of class {reference.class_name}"
            self.logger.error(reason)
            return NotFound(reason)
        if is_local_file(exported.exported_from):
            return self.resolve_local(exported.class_name, exported.exported_from,
                                      context.package_name, context.file_path)
        return self.resolve_exported(exported)
