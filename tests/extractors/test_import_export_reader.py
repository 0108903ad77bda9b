import logging

import pytest

from componentgen.base.types import ExportDeclaration, ImportDeclaration
from componentgen.extractors.import_export_reader import get_export_declarations, get_import_declarations

SOURCE = '''
import {A, B as C} from "./a";
import * as q from "other-package";
import D = require("d-package");
import E from "./e";

export * from "./foo";
export {X, Y as Z} from "./lib/../bar";
export {W};
export * as ns from "./ns";
export class Local {}
'''


@pytest.fixture
def source(parse_ts):
    return parse_ts(SOURCE)


def test_named_and_namespace_imports(source):
    imports = get_import_declarations(source)
    assert imports["./a"] == {ImportDeclaration("A", "A"), ImportDeclaration("B", "C")}
    assert imports["other-package"] == {ImportDeclaration("*", "q")}


def test_import_equals_is_a_namespace_import(source):
    imports = get_import_declarations(source)
    assert imports["d-package"] == {ImportDeclaration("*", "D")}


def test_default_import_is_reported_and_dropped(source, caplog):
    imports = get_import_declarations(source)
    assert "./e" not in imports
    assert "Can't understand specifier" in caplog.text


def test_exports_are_keyed_by_normalized_path(source):
    exports = get_export_declarations(source)
    assert exports == {
        "foo": {ExportDeclaration("*", "*")},
        "bar": {ExportDeclaration("X", "X"), ExportDeclaration("Y", "Z")},
    }


def test_exports_without_source_are_skipped(source, caplog):
    caplog.set_level(logging.DEBUG)
    get_export_declarations(source)
    assert "Can not understand exported constant" in caplog.text
    assert "Skipping namespace re-export" in caplog.text


def test_file_without_imports(parse_ts):
    assert get_import_declarations(parse_ts("export class A {}")) == {}
