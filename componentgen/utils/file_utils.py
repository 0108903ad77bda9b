import json
import logging
import os
from typing import Iterable, Iterator, List, Optional, Tuple

import pathspec

TYPESCRIPT_EXTENSIONS = (".ts", ".d.ts")

logger = logging.getLogger(__name__)


class JsonFileError(ValueError):
    pass


def get_json(file_path: str):
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise JsonFileError(f"JSON syntax error in {file_path}: {e}") from e


def get_array(obj: dict, key: str) -> list:
    value = obj.get(key)
    if not value:
        return []
    return value if isinstance(value, list) else [value]


def copy_context(document: dict, to: List[str]) -> None:
    for context in get_array(document, "@context"):
        if context not in to:
            to.append(context)


def is_local_file(module: str) -> bool:
    return module.startswith("/") or module.startswith("./") or module.startswith("../")


def find_typescript_file(path: str) -> Optional[str]:
    """The .ts or .d.ts file for a module path given without extension."""
    for extension in TYPESCRIPT_EXTENSIONS:
        if os.path.isfile(path + extension):
            return path + extension
    return None


def visit_files(directory: str) -> Iterator[str]:
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            yield os.path.join(root, name)


def ignore_spec(patterns: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def visit_jsonld_files(directory: str, ignore: Optional[pathspec.PathSpec] = None,
                       log=logger) -> Iterator[Tuple[str, dict]]:
    for file_path in visit_files(directory):
        if not file_path.endswith(".jsonld"):
            log.debug(f"Skipping file {file_path} without .jsonld extension")
            continue
        if ignore is not None and ignore.match_file(os.path.relpath(file_path, directory)):
            continue
        try:
            content = get_json(file_path)
        except (JsonFileError, OSError) as e:
            log.debug(f"Skipping file {file_path} with invalid json: {e}")
            continue
        yield file_path, content
