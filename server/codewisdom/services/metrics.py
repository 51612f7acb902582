from typing import FrozenSet, List, Tuple

from tree_sitter import Node

from codewisdom.config import (
    COMMENT_NODE_TYPES,
    IDENTIFIER_NODE_TYPES,
    NAMING_ALLOWLIST,
    NAMING_MAX_SHORT_LENGTH,
)
from codewisdom.services.analysis_types import FunctionRecord, RawFileMetrics
from codewisdom.services.languages import LanguageProfile
from codewisdom.services.tree_sitter_parser import node_text, walk


def extract_metrics(root: Node, profile: LanguageProfile, source: bytes) -> RawFileMetrics:
    """Run every extraction pass over one parsed file."""
    functions = discover_functions(root, profile, source)
    total_lines, comment_lines = count_file_lines(root)
    naming_violations = count_naming_violations(root, source)
    return RawFileMetrics(
        functions=tuple(functions),
        total_lines=total_lines,
        comment_lines=comment_lines,
        naming_violations=naming_violations,
    )


def discover_functions(root: Node, profile: LanguageProfile, source: bytes) -> List[FunctionRecord]:
    """
    Find function definitions in pre-order.

    The search stops at each function definition: nested functions are not
    reported on their own (their decisions still count towards the enclosing
    function's complexity). Exempt definitions are skipped together with
    their bodies.
    """
    function_types = profile.function_node_types()
    functions: List[FunctionRecord] = []

    stack = [root]
    while stack:
        node = stack.pop()
        if _is_function_node(node, function_types):
            if not profile.is_exempt_function(node):
                functions.append(_build_function_record(node, profile, source))
            continue
        stack.extend(reversed(node.children))

    return functions


def _is_function_node(node: Node, function_types: FrozenSet[str]) -> bool:
    # Keyword tokens share their text as type (JS `function`), so only named nodes count.
    return node.is_named and node.type in function_types


def _build_function_record(func_node: Node, profile: LanguageProfile, source: bytes) -> FunctionRecord:
    return FunctionRecord(
        extracted_name=profile.extract_name(func_node, source),
        line_start=func_node.start_point.row + 1,
        line_end=func_node.end_point.row + 1,
        complexity=calculate_complexity(func_node, profile),
    )


def calculate_complexity(func_node: Node, profile: LanguageProfile) -> int:
    """
    Cyclomatic complexity of one function.

    Every node in the subtree that is a decision node, or failing that a
    short-circuit boolean operator, adds one. Every function definition in
    the subtree (the function itself and any nested ones) adds its base
    point.
    """
    complexity_types = profile.complexity_node_types()
    function_types = profile.function_node_types()

    complexity = 0
    for node in walk(func_node):
        if node.type in complexity_types:
            complexity += 1
        elif profile.is_logical_operator(node):
            complexity += 1

        if _is_function_node(node, function_types):
            complexity += 1

    return max(complexity, 1)


def count_file_lines(root: Node) -> Tuple[int, int]:
    """Return (total_lines, comment_lines) for a whole file."""
    total_lines = root.end_point.row + 1
    comment_lines = sum(
        _comment_line_span(node) for node in walk(root) if node.type in COMMENT_NODE_TYPES
    )
    return total_lines, comment_lines


def _comment_line_span(node: Node) -> int:
    start_row = node.start_point.row
    end_row = node.end_point.row
    # Some grammars include the terminating newline in line comments.
    if node.end_point.column == 0 and end_row > start_row:
        end_row -= 1
    return end_row - start_row + 1


def is_naming_violation(name: str) -> bool:
    return len(name) <= NAMING_MAX_SHORT_LENGTH and name not in NAMING_ALLOWLIST


def count_naming_violations(root: Node, source: bytes) -> int:
    # No scope or role awareness: a loop counter and a class name are judged alike.
    return sum(
        1
        for node in walk(root)
        if node.type in IDENTIFIER_NODE_TYPES and is_naming_violation(node_text(node, source))
    )
