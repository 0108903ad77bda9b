"""
Completes existing component files with whatever the generator would produce for them.
Values already present in a file are never overwritten.
"""
import copy
import json
import logging
import os
from typing import Optional

from tqdm import tqdm

from componentgen.generate.generator import GenerationError, generate_component, read_manifest
from componentgen.resolution.component_lookup import CONTEXT_FILE
from componentgen.resolution.package_discovery import ModuleRegistry, discover_modules
from componentgen.utils.file_utils import JsonFileError, get_json, ignore_spec, visit_jsonld_files

REQUIRED_ATTRIBUTES = ("@id", "requireElement", "@type")
VALID_TYPES = ("Class", "AbstractClass", "Instance")

logger = logging.getLogger(__name__)


def _fix_recursive(original, other):
    if not isinstance(other, dict) or not isinstance(original, dict):
        return
    for key, value in other.items():
        if key in original:
            _fix_recursive(original[key], value)
        else:
            original[key] = copy.deepcopy(value)


def additive_fix(original: dict, generated: dict) -> dict:
    fixed = copy.deepcopy(original)
    _fix_recursive(fixed, generated)
    return fixed


def fix_component(directory: str, component_path: str, module_root: str = ".",
                  registry: Optional[ModuleRegistry] = None, logger=logger) -> dict:
    if not component_path:
        raise GenerationError("Missing argument component")
    read_manifest(directory)
    modules_path = os.path.join(directory, module_root)
    if not os.path.isdir(modules_path):
        raise GenerationError(f"Modules path {modules_path} does not exist")
    absolute_path = os.path.join(directory, component_path)
    if not os.path.isfile(absolute_path):
        raise GenerationError(f"File {component_path} does not exist")
    content = get_json(absolute_path)
    if not isinstance(content, dict) or "components" not in content:
        raise GenerationError(f"No components entry in component file {component_path}")

    if registry is None:
        registry = discover_modules(modules_path, logger)
    components = content["components"]
    for i, component in enumerate(components):
        missing = [attribute for attribute in REQUIRED_ATTRIBUTES if attribute not in component]
        if missing:
            logger.error(f"Missing attribute {missing[0]} in component {i} in file {component_path}")
            continue
        if component["@type"] not in VALID_TYPES:
            logger.error(f"Attribute @type must have one of the following values: {', '.join(VALID_TYPES)}")
            continue
        try:
            generated = generate_component(directory, component["requireElement"], module_root, registry, logger)
        except GenerationError as e:
            logger.error(f"Could not fix component {component['@id']}: {e}")
            continue
        components[i] = additive_fix(component, generated["components"][0])
    return content


def fix_component_file(directory: str, component_path: str, module_root: str = ".", print_output: bool = False,
                       registry: Optional[ModuleRegistry] = None, logger=logger) -> str:
    fixed = fix_component(directory, component_path, module_root, registry, logger)
    json_string = json.dumps(fixed, indent=4, ensure_ascii=False)
    if print_output:
        print(json_string)
        return json_string
    absolute_path = os.path.join(directory, component_path)
    logger.info(f"Writing output to {absolute_path}")
    with open(absolute_path, "w", encoding="utf-8") as f:
        f.write(json_string)
    return json_string


def fix_package(directory: str, module_root: str = ".", print_output: bool = False, logger=logger) -> int:
    """Fixes every component file of a package. Returns the number of files that were fixed."""
    manifest = read_manifest(directory)
    components_path = os.path.join(directory, manifest["lsd:components"])
    if not os.path.exists(components_path):
        raise GenerationError(f"Not a valid components path: {components_path}")
    modules_path = os.path.join(directory, module_root)
    if not os.path.isdir(modules_path):
        raise GenerationError(f"Modules path {modules_path} does not exist")

    registry = discover_modules(modules_path, logger)
    blacklist = ignore_spec([os.path.basename(components_path), CONTEXT_FILE])
    files = [path for path, _ in visit_jsonld_files(os.path.dirname(components_path), blacklist, logger)]
    fixed = 0
    for file_path in tqdm(files, desc="Fixing components", disable=print_output):
        relative_path = os.path.relpath(file_path, directory)
        try:
            fix_component_file(directory, relative_path, module_root, print_output, registry, logger)
        except (GenerationError, JsonFileError) as e:
            logger.error(f"Failed to fix component file {relative_path}: {e}")
            continue
        fixed += 1
    return fixed
