from functools import lru_cache
from pathlib import Path
from typing import AbstractSet, Dict, Iterator, Optional, Union

import tree_sitter_c as tsc
import tree_sitter_cpp as tscpp
import tree_sitter_go as tsgo
import tree_sitter_java as tsjava
import tree_sitter_javascript as tsjavascript
import tree_sitter_python as tspython
import tree_sitter_rust as tsrust
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from codewisdom.config import EXTENSION_LANGUAGES, IGNORE_SUFFIXES
from codewisdom.services.errors import ParseFailureError, UnsupportedLanguageError

# Load grammars once per process
LANGUAGES: Dict[str, Language] = {
    'c': Language(tsc.language()),
    'cpp': Language(tscpp.language()),
    'python': Language(tspython.language()),
    'java': Language(tsjava.language()),
    'rust': Language(tsrust.language()),
    'go': Language(tsgo.language()),
    'javascript': Language(tsjavascript.language()),
    'typescript': Language(tstypescript.language_typescript()),
}

SUPPORTED_LANGUAGES = frozenset(LANGUAGES)


def language_for_path(path: Union[str, Path]) -> Optional[str]:
    """Map a file name to one of the supported language ids, or None."""
    name = Path(path).name.lower()
    if any(name.endswith(suffix) for suffix in IGNORE_SUFFIXES):
        return None
    return EXTENSION_LANGUAGES.get(Path(name).suffix)


@lru_cache(maxsize=None)
def get_parser(language: str) -> Parser:
    if language not in SUPPORTED_LANGUAGES:
        raise UnsupportedLanguageError(language)
    return Parser(LANGUAGES[language])


def parse(source: bytes, language: str, path: str = "<memory>") -> Tree:
    """
    Parse `source` with the grammar for `language`.

    A tree containing any ERROR or MISSING node is rejected: the metrics are
    only meaningful on a fully valid tree.
    """
    parser = get_parser(language)
    tree = parser.parse(source)
    if tree is None:
        raise ParseFailureError(path, language, "parser returned no tree")
    if tree.root_node.has_error:
        raise ParseFailureError(path, language)
    return tree


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of `node` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_first(node: Node, types: AbstractSet[str]) -> Optional[Node]:
    """First node in pre-order (including `node`) whose type is in `types`."""
    for candidate in walk(node):
        if candidate.type in types:
            return candidate
    return None
