import json
import logging
import os
from typing import Optional

from componentgen.base.types import ExportReference
from componentgen.extractors import ast_utils
from componentgen.extractors.comment_utils import get_comment, parse_doc_comment
from componentgen.extractors.field_extractor import FieldExtractor
from componentgen.extractors.import_export_reader import get_import_declarations
from componentgen.generate.context_compactor import ContextCompactor
from componentgen.generate.parameter_synthesizer import ParameterSynthesizer
from componentgen.generate.superclass_chain import SuperClassChainBuilder
from componentgen.resolution.component_lookup import ComponentLookup
from componentgen.resolution.declaration_resolver import DeclarationResolver
from componentgen.resolution.package_discovery import MANIFEST, ModuleRegistry, discover_modules
from componentgen.utils.file_utils import copy_context, get_json

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    pass


def read_manifest(directory: str) -> dict:
    if not directory:
        raise GenerationError("Missing argument package")
    if not os.path.isdir(directory):
        raise GenerationError("Not a valid package, directory does not exist")
    manifest_path = os.path.join(directory, MANIFEST)
    if not os.path.isfile(manifest_path):
        raise GenerationError("Not a valid package, no package.json")
    manifest = get_json(manifest_path)
    if not isinstance(manifest, dict):
        raise GenerationError(f"Not a valid package, {manifest_path} is not a JSON object")
    if "lsd:module" not in manifest:
        raise GenerationError("Missing 'lsd:module' IRI in package.json")
    if "lsd:components" not in manifest:
        raise GenerationError("package.json doesn't contain lsd:components")
    if not isinstance(manifest.get("lsd:contexts") or {}, dict):
        raise GenerationError("lsd:contexts in package.json must be an object")
    return manifest


def generate_component(directory: str, class_name: str, module_root: str = ".",
                       registry: Optional[ModuleRegistry] = None, logger=logger) -> dict:
    """
    Builds the components document describing one exported class of a package.

    Raises GenerationError when the package is not usable or the class is not exported.
    Pieces that cannot be resolved are logged and left out of the document.
    """
    if not class_name:
        raise GenerationError("Missing argument class-name")
    manifest = read_manifest(directory)
    modules_path = os.path.join(directory, module_root)
    if not os.path.isdir(modules_path):
        raise GenerationError(f"Modules path {modules_path} does not exist")
    components_path = os.path.join(directory, manifest["lsd:components"])
    if not os.path.exists(components_path):
        raise GenerationError(f"Not a valid components path: {components_path}")

    if registry is None:
        registry = discover_modules(modules_path, logger)
    resolver = DeclarationResolver(registry, logger=logger)
    lookup = ComponentLookup(resolver, logger)
    field_extractor = FieldExtractor(resolver, lookup, logger)

    resolved = resolver.resolve_exported(ExportReference(class_name, manifest.get("name")))
    if not resolved:
        raise GenerationError(f"Did not find a matching class for name {class_name}, "
                              f"please check the name and make sure it has been exported")
    declaration = resolved.value

    class_comment = None
    raw_comment = get_comment(declaration.source.comments, declaration.node)
    if raw_comment:
        class_comment = parse_doc_comment(raw_comment).description or None

    try:
        compactor = ContextCompactor.from_manifest(directory, manifest, logger)
    except OSError as e:
        raise GenerationError(f"Could not read the contexts of package {manifest.get('name')}: {e}") from e
    module_iri = manifest["lsd:module"]
    document = {
        "@context": list((manifest.get("lsd:contexts") or {}).keys()),
        "@id": compactor.compact_iri(module_iri),
    }
    compact_path = compactor.compact_iri(f"{module_iri}/{class_name}")
    component = {
        "@id": compact_path,
        "requireElement": class_name,
        "@type": "AbstractClass" if ast_utils.is_abstract(declaration.node) else "Class",
    }
    if class_comment:
        component["comment"] = class_comment

    imports = get_import_declarations(declaration.source, logger)
    chain = SuperClassChainBuilder(resolver, field_extractor, lookup, logger).build_chain(declaration, imports)
    # the second chain element is the direct superclass
    if len(chain) >= 2 and chain[1].component is not None:
        component["extends"] = chain[1].component.component["@id"]
        copy_context(chain[1].component.component_document, document["@context"])

    synthesized = ParameterSynthesizer(resolver, field_extractor, logger).synthesize(chain, compact_path)
    for context in synthesized["contexts"]:
        if context not in document["@context"]:
            document["@context"].append(context)
    component["parameters"] = synthesized["parameters"]
    component["constructorArguments"] = synthesized["constructorArguments"]
    document["components"] = [component]
    return document


def generate_component_file(directory: str, class_name: str, output_path: Optional[str] = None,
                            module_root: str = ".", print_output: bool = False, logger=logger) -> str:
    """Generates a component and prints it or writes it to disk. Returns the serialised document."""
    document = generate_component(directory, class_name, module_root, logger=logger)
    json_string = json.dumps(document, indent=4, ensure_ascii=False)
    if print_output:
        print(json_string)
        return json_string
    path = output_path or os.path.join(directory, "components", "Actor", f"{class_name}.jsonld")
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    logger.info(f"Writing output to {path}")
    with open(path, "w", encoding="utf-8") as f:
        f.write(json_string)
    return json_string
