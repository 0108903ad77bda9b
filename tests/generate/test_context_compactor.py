import logging

from componentgen.generate.context_compactor import ContextCompactor

CONTEXT = {
    "@context": [
        "https://linkedsoftwaredependencies.org/bundles/npm/componentsjs/^4.0.0/components/context.jsonld",
        {
            "npmd": "https://linkedsoftwaredependencies.org/bundles/npm/",
            "mp": "npmd:my-package/",
            "long": "https://linkedsoftwaredependencies.org/bundles/npm/my-package/lib/",
            "noDelimiter": "https://linkedsoftwaredependencies.org/bundles/npm/my",
            "declared": {"@id": "https://example.org/v", "@prefix": True},
            "@vocab": "https://example.org/vocab#",
        },
    ],
}


def test_shortest_prefix_wins():
    compactor = ContextCompactor([CONTEXT])
    assert compactor.compact_iri("https://linkedsoftwaredependencies.org/bundles/npm/my-package/Foo") == "mp:Foo"
    assert compactor.compact_iri("https://linkedsoftwaredependencies.org/bundles/npm/my-package/lib/Bar") == "long:Bar"
    assert compactor.compact_iri("https://linkedsoftwaredependencies.org/bundles/npm/my-package") == "npmd:my-package"


def test_terms_must_end_in_a_delimiter_unless_declared_prefix():
    compactor = ContextCompactor([CONTEXT])
    assert compactor.compact_iri("https://example.org/vocabulary") == "declared:ocabulary"
    assert compactor.compact_iri("https://linkedsoftwaredependencies.org/bundles/npm/myself") == \
        "npmd:myself"


def test_unknown_iri_is_unchanged():
    compactor = ContextCompactor([CONTEXT])
    assert compactor.compact_iri("http://other.org/x") == "http://other.org/x"
    assert ContextCompactor().compact_iri("http://other.org/x") == "http://other.org/x"


def test_remote_contexts_are_skipped(caplog):
    caplog.set_level(logging.DEBUG)
    ContextCompactor([CONTEXT])
    assert "Skipping remote context" in caplog.text


def test_from_manifest(tmp_path):
    (tmp_path / "components").mkdir()
    (tmp_path / "components" / "context.jsonld").write_text('{"@context": {"ex": "http://example.org/p/"}}')
    manifest = {"lsd:contexts": {"http://example.org/p/context.jsonld": "components/context.jsonld"}}
    compactor = ContextCompactor.from_manifest(str(tmp_path), manifest)
    assert compactor.compact_iri("http://example.org/p/Foo") == "ex:Foo"
    assert ContextCompactor.from_manifest(str(tmp_path), {}).terms == {}
