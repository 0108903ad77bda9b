import json
import os

import pytest

from componentgen.fix.fix import additive_fix, fix_component, fix_component_file, fix_package
from componentgen.generate.generator import GenerationError

FOO = '''export class Foo {
    constructor(
        /** @default 5 */
        size: number,
        name: string,
    ) {}
}
'''

EXISTING_FOO = {
    "@id": "mp:Foo",
    "requireElement": "Foo",
    "@type": "Class",
    "comment": "Written by hand",
    "parameters": [{"@id": "mp:Foo#size", "range": "xsd:integer"}],
}


def read(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def package(lsd_package):
    return lsd_package({
        "index.ts": 'export * from "./lib/Foo";\n',
        "lib/Foo.ts": FOO,
        "components/Actor/Broken.jsonld": {"components": [
            {"@id": "mp:Nothing", "@type": "Class"},
            {"@id": "mp:Foo", "requireElement": "Foo", "@type": "Variable"},
            {"@id": "mp:Gone", "requireElement": "Gone", "@type": "Class"},
        ]},
        "components/Actor/NotComponents.jsonld": {"@id": "mp:Other"},
    }, components={"Foo": EXISTING_FOO})


def test_additive_fix_never_overwrites():
    original = {"a": 1, "nested": {"x": "keep"}, "list": [1]}
    generated = {"a": 2, "b": 3, "nested": {"x": "new", "y": "added"}, "list": [2, 3]}
    fixed = additive_fix(original, generated)
    assert fixed == {"a": 1, "b": 3, "nested": {"x": "keep", "y": "added"}, "list": [1]}
    assert original == {"a": 1, "nested": {"x": "keep"}, "list": [1]}


def test_additive_fix_stops_at_strings():
    assert additive_fix({"a": {"b": 1}}, {"a": "text"}) == {"a": {"b": 1}}


def test_fix_component_fills_in_missing_attributes(package):
    fixed = fix_component(package, "components/Actor/Foo.jsonld")
    component = fixed["components"][0]
    assert component["comment"] == "Written by hand"
    assert component["parameters"] == [{"@id": "mp:Foo#size", "range": "xsd:integer"}]
    assert component["constructorArguments"] == [{"@id": "mp:Foo#size"}, {"@id": "mp:Foo#name"}]


def test_invalid_components_are_reported(package, caplog):
    fixed = fix_component(package, "components/Actor/Broken.jsonld")
    assert fixed["components"] == read(os.path.join(package, "components", "Actor", "Broken.jsonld"))["components"]
    assert "Missing attribute requireElement in component 0" in caplog.text
    assert "Attribute @type must have one of the following values: Class, AbstractClass, Instance" in caplog.text
    assert "Could not fix component mp:Gone" in caplog.text


def test_file_without_components(package):
    with pytest.raises(GenerationError, match="No components entry"):
        fix_component(package, "components/Actor/NotComponents.jsonld")


def test_missing_file(package):
    with pytest.raises(GenerationError, match="does not exist"):
        fix_component(package, "components/Actor/Nope.jsonld")


def test_fix_component_file_overwrites(package):
    fix_component_file(package, "components/Actor/Foo.jsonld")
    component = read(os.path.join(package, "components", "Actor", "Foo.jsonld"))["components"][0]
    assert component["constructorArguments"] == [{"@id": "mp:Foo#size"}, {"@id": "mp:Foo#name"}]


def test_fix_package(package, caplog):
    index_path = os.path.join(package, "components", "components.jsonld")
    context_path = os.path.join(package, "components", "context.jsonld")
    index_before, context_before = read(index_path), read(context_path)

    assert fix_package(package) == 2
    assert "Failed to fix component file components/Actor/NotComponents.jsonld" in caplog.text
    assert read(index_path) == index_before
    assert read(context_path) == context_before
    component = read(os.path.join(package, "components", "Actor", "Foo.jsonld"))["components"][0]
    assert "constructorArguments" in component
