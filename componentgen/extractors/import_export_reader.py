"""
Reads the top-level import and export statements of a parsed file.

Import tables are keyed by the module source exactly as written, since they
are resolved relative to the importing file later on. Export tables are
keyed by the normalized module path.
"""
import logging
import posixpath
from typing import List, Optional, Tuple

from componentgen.base.types import (
    ExportDeclaration,
    ExportTable,
    ImportDeclaration,
    ImportTable,
    ParsedSource,
)

WILDCARD = "*"

logger = logging.getLogger(__name__)


def _string_value(node, source: ParsedSource) -> Optional[str]:
    if node is None or node.type != "string":
        return None
    return source.get_text(node)[1:-1]


def _specifier_import(spec, source: ParsedSource) -> Optional[ImportDeclaration]:
    name = spec.child_by_field_name("name")
    alias = spec.child_by_field_name("alias")
    if name is None:
        return None
    class_name = source.get_text(name)
    # `import {A as B}`: A may itself be an alias created by `export {C as A}`
    import_name = source.get_text(alias) if alias is not None else class_name
    return ImportDeclaration(class_name, import_name)


def _read_import(statement, source: ParsedSource, log) -> Optional[Tuple[str, List[ImportDeclaration]]]:
    for c in statement.named_children:
        if c.type == "import_require_clause":
            # `import A = require("b")` behaves like `import * as A from "b"`
            ident = next((cc for cc in c.named_children if cc.type == "identifier"), None)
            module = _string_value(c.child_by_field_name("source"), source)
            if ident is None or module is None:
                log.error("Could not understand import-equals declaration")
                return None
            return module, [ImportDeclaration(WILDCARD, source.get_text(ident))]

    module = _string_value(statement.child_by_field_name("source"), source)
    if module is None:
        log.error(f"Could not understand import declaration {source.get_text(statement)}")
        return None
    imports = []
    for c in statement.named_children:
        if c.type != "import_clause":
            continue
        for spec in c.named_children:
            if spec.type == "named_imports":
                for s in spec.named_children:
                    if s.type != "import_specifier":
                        continue
                    parsed = _specifier_import(s, source)
                    if parsed is not None:
                        imports.append(parsed)
            elif spec.type == "namespace_import":
                ident = next((cc for cc in spec.named_children if cc.type == "identifier"), None)
                if ident is not None:
                    imports.append(ImportDeclaration(WILDCARD, source.get_text(ident)))
            elif spec.type != "comment":
                log.error(f"Can't understand specifier {spec.type}")
    return module, imports


def get_import_declarations(source: ParsedSource, log=logger) -> ImportTable:
    files: ImportTable = {}
    for statement in source.root.named_children:
        if statement.type != "import_statement":
            continue
        parsed = _read_import(statement, source, log)
        if not parsed:
            continue
        module, imports = parsed
        if not imports:
            continue
        files.setdefault(module, set()).update(imports)
    return files


def _read_export(statement, source: ParsedSource, log) -> Optional[Tuple[str, List[ExportDeclaration]]]:
    module = _string_value(statement.child_by_field_name("source"), source)
    clause = None
    for c in statement.children:
        if c.type == "export_clause":
            clause = c
        elif c.type == "namespace_export":
            log.debug(f"Skipping namespace re-export {source.get_text(statement)}")
            return None
    if clause is None:
        if module is not None and any(c.type == "*" for c in statement.children):
            return module, [ExportDeclaration(WILDCARD, WILDCARD)]
        log.debug(f"Skipping export statement {source.get_text(statement).splitlines()[0]}")
        return None
    if module is None:
        log.debug("Can not understand exported constant")
        return None
    exports = []
    for spec in clause.named_children:
        if spec.type != "export_specifier":
            if spec.type != "comment":
                log.error(f"Can't understand specifier {spec.type}")
            continue
        name = spec.child_by_field_name("name")
        alias = spec.child_by_field_name("alias")
        if name is None:
            continue
        class_name = source.get_text(name)
        exports.append(ExportDeclaration(class_name, source.get_text(alias) if alias is not None else class_name))
    return module, exports


def get_export_declarations(source: ParsedSource, log=logger) -> ExportTable:
    files: ExportTable = {}
    for statement in source.root.named_children:
        if statement.type != "export_statement":
            if statement.type != "comment":
                log.debug(f"Skipping line with type {statement.type}")
            continue
        parsed = _read_export(statement, source, log)
        if not parsed:
            continue
        module, exports = parsed
        if not exports:
            continue
        files.setdefault(posixpath.normpath(module), set()).update(exports)
    return files
