from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

# (line, column) with 1-based lines and 0-based columns
Position = Tuple[int, int]


@dataclass(frozen=True)
class Comment:
    text: str
    start: Position
    end: Position


class ParsedSource:
    """A parsed TypeScript file: the raw bytes, the tree-sitter tree and its comments."""

    def __init__(self, code: bytes, tree):
        self.code = code
        self.tree = tree
        self._comments = None

    @property
    def root(self):
        return self.tree.root_node

    def get_text(self, node) -> str:
        return self.code[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @property
    def comments(self) -> List[Comment]:
        if self._comments is None:
            found = []

            def visit(n):
                if n.type == "comment":
                    found.append(Comment(
                        text=self.get_text(n),
                        start=(n.start_point[0] + 1, n.start_point[1]),
                        end=(n.end_point[0] + 1, n.end_point[1]),
                    ))
                for c in n.children:
                    visit(c)

            visit(self.root)
            self._comments = found
        return self._comments


@dataclass(frozen=True)
class ClassReference:
    class_name: str
    namespace: Optional[str] = None


@dataclass(frozen=True)
class ImportDeclaration:
    # exported name of the class, as seen by the importing file
    class_name: str
    # local name given to the import
    import_name: str


@dataclass(frozen=True)
class ExportDeclaration:
    # actual name of the class being exported
    class_name: str
    # name other packages will see
    export_name: str


ImportTable = Dict[str, Set[ImportDeclaration]]
ExportTable = Dict[str, Set[ExportDeclaration]]


@dataclass(frozen=True)
class ExportReference:
    """`exported_from` is either a relative path inside a package or a package name."""
    class_name: str
    exported_from: str


@dataclass(frozen=True, eq=False)
class ParsedClassDeclaration:
    source: ParsedSource
    node: object
    file_path: str
    package_name: str
    class_name: str

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.package_name, self.file_path, self.class_name)

    def same_class(self, other: "ParsedClassDeclaration") -> bool:
        return other is not None and self.key == other.key


class FieldType(Enum):
    SIMPLE = "simple"
    COMPLEX = "complex"


@dataclass
class ParameterMetadata:
    required: bool = True
    unique: bool = True
    range: Optional[str] = None
    default: Optional[str] = None
    comment: Optional[str] = None

    def to_json(self) -> dict:
        data = {"required": self.required, "unique": self.unique}
        if self.range:
            data["range"] = self.range
        if self.default:
            data["default"] = self.default
        if self.comment:
            data["comment"] = self.comment
        return data


@dataclass
class ComponentInformation:
    component: dict
    component_document: dict


@dataclass
class FieldDeclaration:
    key: str
    kind: FieldType
    metadata: ParameterMetadata
    declaration: Optional[ParsedClassDeclaration] = None
    component: Optional[ComponentInformation] = None


@dataclass
class SuperClassChainElement:
    declaration: ParsedClassDeclaration
    component: Optional[ComponentInformation] = None
    constructor_params: List[FieldDeclaration] = field(default_factory=list)


SuperClassChain = List[SuperClassChainElement]
