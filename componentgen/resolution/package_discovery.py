import logging
import os
from typing import Dict, Optional

from componentgen.utils.file_utils import JsonFileError, get_json

MANIFEST = "package.json"

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Packages reachable from a root directory.

    component_paths maps an `lsd:module` IRI to the absolute path of that
    package's components document; package_contents maps every manifest
    path to its parsed content.
    """

    def __init__(self, component_paths: Dict[str, str], package_contents: Dict[str, dict]):
        self.component_paths = component_paths
        self.package_contents = package_contents

    def _find(self, name: str):
        for manifest_path, content in self.package_contents.items():
            if content.get("name") == name:
                return manifest_path, content
        return None, None

    def package_root(self, name: str) -> Optional[str]:
        manifest_path, _ = self._find(name)
        return os.path.dirname(manifest_path) if manifest_path else None

    def package_manifest(self, name: str) -> Optional[dict]:
        return self._find(name)[1]

    def components_path(self, module_iri: str) -> Optional[str]:
        return self.component_paths.get(module_iri)


def _package_dirs(node_modules: str):
    for entry in sorted(os.listdir(node_modules)):
        if entry.startswith("."):
            continue
        path = os.path.join(node_modules, entry)
        if not os.path.isdir(path):
            continue
        if entry.startswith("@"):
            for scoped in sorted(os.listdir(path)):
                scoped_path = os.path.join(path, scoped)
                if os.path.isdir(scoped_path):
                    yield scoped_path
        else:
            yield path


def discover_modules(root_dir: str, log=logger) -> ModuleRegistry:
    component_paths: Dict[str, str] = {}
    package_contents: Dict[str, dict] = {}
    visited = set()

    def visit(directory):
        real = os.path.realpath(directory)
        if real in visited:
            return
        visited.add(real)
        manifest_path = os.path.join(directory, MANIFEST)
        if os.path.isfile(manifest_path):
            try:
                content = get_json(manifest_path)
            except (JsonFileError, OSError) as e:
                log.debug(f"Skipping unreadable manifest {manifest_path}: {e}")
                content = None
            if isinstance(content, dict):
                package_contents[os.path.abspath(manifest_path)] = content
                module_iri = content.get("lsd:module")
                components = content.get("lsd:components")
                if module_iri and components:
                    component_paths.setdefault(module_iri, os.path.abspath(os.path.join(directory, components)))
        node_modules = os.path.join(directory, "node_modules")
        if os.path.isdir(node_modules):
            for package_dir in _package_dirs(node_modules):
                visit(package_dir)

    visit(root_dir)
    log.debug(f"Loaded {len(package_contents)} node modules")
    return ModuleRegistry(component_paths, package_contents)
