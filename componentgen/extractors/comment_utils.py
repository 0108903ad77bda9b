import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from componentgen.base.types import Comment, Position
from componentgen.extractors.ast_utils import TypeNode
from componentgen.extractors.type_utils import is_valid_xsd

RANGE_TAG = "range"
DEFAULT_TAG = "default"
IGNORED_TAG = "ignored"

TAG_PATTERN = re.compile(r"(?:^|(?<=\s))@([\w-]+):?\s*(?:\{([^}]*)\}|([^\s@]\S*))?")

logger = logging.getLogger(__name__)


@dataclass
class DocComment:
    description: str = ""
    tags: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class FieldComment:
    range: Optional[str] = None
    default: Optional[str] = None
    ignored: bool = False
    description: Optional[str] = None


def _strip_comment(text: str) -> List[str]:
    text = text.strip()
    if text.startswith("/*"):
        text = text[2:]
        if text.startswith("*"):
            text = text[1:]
    elif text.startswith("//"):
        text = text[2:]
    if text.endswith("*/"):
        text = text[:-2]
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    return lines


def parse_doc_comment(text: str) -> DocComment:
    """Split a documentation comment into its free-text description and `@tag {type}` pairs."""
    description = []
    tags = []
    seen_tag = False
    for line in _strip_comment(text):
        matches = list(TAG_PATTERN.finditer(line))
        if not matches:
            if not seen_tag and line:
                description.append(line)
            continue
        if not seen_tag:
            description.append(line[:matches[0].start()].strip())
        seen_tag = True
        for m in matches:
            braced, bare = m.group(2), m.group(3)
            value = braced if braced is not None else (bare or "")
            tags.append((m.group(1), value.strip()))
    return DocComment(" ".join(d for d in description if d).strip(), tags)


def get_comment(comments: List[Comment], node) -> Optional[str]:
    """Comment ending on the line right before the declaration starts."""
    line = node.start_point[0] + 1
    for comment in comments:
        if comment.end[0] == line - 1:
            return comment.text
    return None


def get_in_between_comment(comments: List[Comment], start: Position, end: Position) -> Optional[str]:
    for comment in comments:
        if comment.start >= start and end >= comment.end:
            return comment.text
    return None


def parse_field_comment(comment: Optional[str], field_type: Optional[TypeNode] = None, log=logger) -> FieldComment:
    parsed = FieldComment()
    if not comment:
        return parsed
    doc = parse_doc_comment(comment)
    if doc.description:
        parsed.description = doc.description
    for tag, value in doc.tags:
        tag = tag.lower()
        if tag == RANGE_TAG:
            xsd = value.lower()
            if field_type is not None and is_valid_xsd(field_type, xsd, log=log):
                parsed.range = f"xsd:{xsd}"
            else:
                log.error(f"Found range type {xsd} but could not match to {field_type}")
        elif tag == DEFAULT_TAG:
            if value:
                parsed.default = value
        elif tag == IGNORED_TAG:
            parsed.ignored = True
        else:
            log.debug(f"Could not understand tag {tag}")
    return parsed
