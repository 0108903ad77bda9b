import pytest

from componentgen.base.results import Found, NotFound
from componentgen.base.types import ClassReference, ExportReference
from componentgen.extractors.import_export_reader import get_import_declarations
from componentgen.resolution.declaration_resolver import DeclarationResolver, find_exported_class
from componentgen.resolution.package_discovery import discover_modules

DEP_MANIFEST = {"name": "dep"}


@pytest.fixture
def resolver(make_package):
    root = make_package("my-package", {"name": "my-package"}, {
        "index.ts": 'export * from "./broken";\nexport * from "./lib/Foo";\nexport {Bar as Baz} from "./lib/Bar";\n',
        "broken.ts": "export class Broken { constructor( }\n",
        "lib/Foo.ts": '''import {Bar} from "./Bar";
import {Base} from "dep";
import * as d from "dep";

export class Local {}
export class Foo extends Base {
    constructor(bar: Bar, other: d.Other, local: Local) {
        super();
    }
}
''',
        "lib/Bar.ts": "export class Bar {}\n",
        "node_modules/dep/package.json": '{"name": "dep"}',
        "node_modules/dep/index.ts": 'export * from "./src/Base";\n',
        "node_modules/dep/src/Base.ts": "export class Base {}\nexport interface Other {}\n",
    })
    return DeclarationResolver(discover_modules(root))


def test_wildcard_export(resolver, caplog):
    resolved = resolver.resolve_exported(ExportReference("Foo", "my-package"))
    assert isinstance(resolved, Found)
    assert resolved.value.file_path == "lib/Foo"
    assert resolved.value.key == ("my-package", "lib/Foo", "Foo")
    # the unparseable candidate is reported and skipped
    assert "invalid syntax" in caplog.text


def test_aliased_export(resolver):
    resolved = resolver.resolve_exported(ExportReference("Baz", "my-package"))
    assert resolved
    assert resolved.value.class_name == "Bar"
    assert resolved.value.file_path == "lib/Bar"


def test_missing_export(resolver, caplog):
    resolved = resolver.resolve_exported(ExportReference("Nope", "my-package"))
    assert isinstance(resolved, NotFound)
    assert not resolved
    assert "Did not find an exported declaration of Nope" in caplog.text


def test_unknown_package(resolver):
    resolved = resolver.resolve_exported(ExportReference("Foo", "unknown"))
    assert not resolved
    assert "unknown" in resolved.reason


@pytest.fixture
def foo(resolver):
    declaration = resolver.resolve_exported(ExportReference("Foo", "my-package")).value
    return declaration, get_import_declarations(declaration.source)


def test_find_exported_class(foo):
    _, imports = foo
    assert find_exported_class(ClassReference("Bar"), imports) == ExportReference("Bar", "./Bar")
    assert find_exported_class(ClassReference("Other", "d"), imports) == ExportReference("Other", "dep")
    assert find_exported_class(ClassReference("Nope"), imports) is None


def test_resolve_relative_import(resolver, foo):
    declaration, imports = foo
    resolved = resolver.resolve_with_context(ClassReference("Bar"), declaration, imports)
    assert resolved.value.key == ("my-package", "lib/Bar", "Bar")


def test_resolve_from_other_package(resolver, foo):
    declaration, imports = foo
    base = resolver.resolve_with_context(ClassReference("Base"), declaration, imports)
    assert base.value.key == ("dep", "src/Base", "Base")
    other = resolver.resolve_with_context(ClassReference("Other", "d"), declaration, imports)
    assert other.value.key == ("dep", "src/Base", "Other")


def test_resolve_in_same_file(resolver, foo):
    declaration, imports = foo
    resolved = resolver.resolve_with_context(ClassReference("Local"), declaration, imports)
    assert resolved.value.key == ("my-package", "lib/Foo", "Local")
    assert resolved.value.source is declaration.source


def test_unresolvable_reference(resolver, foo, caplog):
    declaration, imports = foo
    assert not resolver.resolve_with_context(ClassReference("Missing"), declaration, imports)
    assert "Could not find declaration of class Missing" in caplog.text
