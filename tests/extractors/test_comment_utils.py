from componentgen.base.types import Comment
from componentgen.extractors.ast_utils import ArrayType, PrimitiveType
from componentgen.extractors.comment_utils import (
    get_comment,
    get_in_between_comment,
    parse_doc_comment,
    parse_field_comment,
)

DOC = """/**
 * Hello world
 * second line
 * @range {integer}
 * @default {5}
 */"""


def test_parse_doc_comment():
    doc = parse_doc_comment(DOC)
    assert doc.description == "Hello world second line"
    assert doc.tags == [("range", "integer"), ("default", "5")]


def test_tags_on_one_line():
    doc = parse_doc_comment("/** Text @default hello world @ignored */")
    assert doc.description == "Text"
    assert doc.tags == [("default", "hello"), ("ignored", "")]


def test_range_is_validated_against_the_type():
    parsed = parse_field_comment(DOC, PrimitiveType("number"))
    assert parsed.range == "xsd:integer"
    assert parsed.default == "5"
    assert parsed.description == "Hello world second line"
    assert not parsed.ignored


def test_range_of_an_array_uses_its_element():
    parsed = parse_field_comment("/** @range {double} */", ArrayType(PrimitiveType("number")))
    assert parsed.range == "xsd:double"


def test_invalid_range_is_dropped(caplog):
    parsed = parse_field_comment("/** @range {boolean} */", PrimitiveType("number"))
    assert parsed.range is None
    assert "Found range type boolean" in caplog.text


def test_ignored_tag():
    parsed = parse_field_comment("/**\n * @ignored\n */", PrimitiveType("string"))
    assert parsed.ignored


def test_no_comment():
    parsed = parse_field_comment(None, PrimitiveType("string"))
    assert parsed.range is None and parsed.default is None and parsed.description is None


def test_comment_right_before_a_node(parse_ts):
    source = parse_ts("/** Describes A */\nexport class A {}\n\n/** Too far */\n\nexport class B {}\n")
    a, b = [s.child_by_field_name("declaration") for s in source.root.named_children if s.type == "export_statement"]
    assert get_comment(source.comments, a) == "/** Describes A */"
    assert get_comment(source.comments, b) is None


def test_comment_in_between_positions():
    comments = [Comment("/** a */", (1, 4), (1, 12)), Comment("/** b */", (2, 4), (2, 12))]
    assert get_in_between_comment(comments, (1, 0), (1, 20)) == "/** a */"
    assert get_in_between_comment(comments, (1, 13), (3, 0)) == "/** b */"
    assert get_in_between_comment(comments, (2, 13), (3, 0)) is None
