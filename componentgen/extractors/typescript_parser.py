import chardet
import tree_sitter_typescript
from tree_sitter import Language, Parser

from componentgen.base.tree_parser import SourceSyntaxError, TreeParser
from componentgen.base.types import ParsedSource


def read_source_text(file_path: str) -> str:
    with open(file_path, 'rb') as f:
        raw = f.read()
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        pass
    guess = chardet.detect(raw)
    encoding = guess['encoding'] or 'utf-8'
    try:
        return raw.decode(encoding)
    except (LookupError, UnicodeDecodeError):
        return raw.decode('utf-8', errors='replace')


def _first_error_node(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for c in node.children:
        if c.has_error or c.type == "ERROR" or c.is_missing:
            found = _first_error_node(c)
            if found is not None:
                return found
    return None


class TypeScriptTreeParser(TreeParser):
    def __init__(self):
        self.language = Language(tree_sitter_typescript.language_typescript())
        self.parser = Parser(self.language)

    def parse(self, text: str) -> ParsedSource:
        code = text.encode('utf-8')
        tree = self.parser.parse(code)
        if tree.root_node.has_error:
            bad = _first_error_node(tree.root_node) or tree.root_node
            line, column = bad.start_point[0] + 1, bad.start_point[1]
            kind = "missing " + bad.type if bad.is_missing else "unexpected syntax"
            raise SourceSyntaxError(f"{kind} at line {line}, column {column}", line, column)
        return ParsedSource(code, tree)

    def parse_file(self, file_path: str) -> ParsedSource:
        return self.parse(read_source_text(file_path))
