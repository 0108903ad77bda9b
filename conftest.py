import json
import os

import pytest

from componentgen.extractors.typescript_parser import TypeScriptTreeParser

MODULE_IRI = "https://linkedsoftwaredependencies.org/bundles/npm/my-package"
CONTEXT_IRI = MODULE_IRI + "/^1.0.0/components/context.jsonld"


@pytest.fixture(scope="session")
def ts_parser():
    return TypeScriptTreeParser()


@pytest.fixture
def parse_ts(ts_parser):
    return ts_parser.parse


@pytest.fixture
def make_package(tmp_path):
    """
    Writes a package into tmp_path. `files` maps paths relative to the package
    to either source text or an object that is written as JSON.
    """

    def _make(relative_dir, manifest, files=None):
        root = os.path.join(str(tmp_path), relative_dir)
        os.makedirs(root, exist_ok=True)
        with open(os.path.join(root, "package.json"), "w", encoding="utf-8") as f:
            json.dump(manifest, f)
        for name, content in (files or {}).items():
            path = os.path.join(root, name)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                if isinstance(content, str):
                    f.write(content)
                else:
                    json.dump(content, f, indent=4)
        return root

    return _make


@pytest.fixture
def lsd_package(make_package):
    """A components.js package named my-package whose IRIs compact to `mp:`."""

    def _make(files, relative_dir="my-package", components=None):
        manifest = {
            "name": "my-package",
            "lsd:module": MODULE_IRI,
            "lsd:components": "components/components.jsonld",
            "lsd:contexts": {CONTEXT_IRI: "components/context.jsonld"},
        }
        all_files = {
            "components/components.jsonld": {
                "@context": [CONTEXT_IRI],
                "@id": "npmd:my-package",
                "import": [],
            },
            "components/context.jsonld": {
                "@context": {
                    "npmd": "https://linkedsoftwaredependencies.org/bundles/npm/",
                    "mp": "npmd:my-package/",
                },
            },
        }
        for name, component in (components or {}).items():
            all_files[f"components/Actor/{name}.jsonld"] = {
                "@context": [CONTEXT_IRI],
                "@id": "npmd:my-package",
                "components": [component],
            }
        all_files.update(files)
        return make_package(relative_dir, manifest, all_files)

    return _make
