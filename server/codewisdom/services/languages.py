"""
Per-language rules for classifying syntax tree nodes.

Each supported language gets one immutable `LanguageProfile` that answers the
same five questions for the metric extractor:

- which node types are function definitions,
- what a function is called,
- which node types add a decision point,
- whether a node is a short-circuit boolean operator,
- whether a function is boilerplate that should not be scored.

C++ shares the C rules and TypeScript shares the JavaScript rules; the second
profile of each pair is built from the first with `dataclasses.replace`.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, FrozenSet

from tree_sitter import Node

from codewisdom.services.analysis_types import ExtractedName
from codewisdom.services.errors import UnsupportedLanguageError
from codewisdom.services.tree_sitter_parser import find_first, node_text

NameExtractor = Callable[[Node, bytes], ExtractedName]
NodePredicate = Callable[[Node], bool]

LOGICAL_OPERATOR_TOKENS: FrozenSet[str] = frozenset({'&&', '||'})

# In-class C++ method definitions name themselves with a field_identifier.
C_NAME_NODE_TYPES: FrozenSet[str] = frozenset({'identifier', 'field_identifier'})
CPP_SPECIAL_MEMBER_TYPES: FrozenSet[str] = frozenset({'operator_name', 'destructor_name'})


def is_binary_logical_operator(node: Node) -> bool:
    if node.type != 'binary_expression':
        return False
    operator = node.child_by_field_name('operator')
    return operator is not None and operator.type in LOGICAL_OPERATOR_TOKENS


def never_exempt(node: Node) -> bool:
    return False


def extract_name_field(node: Node, source: bytes) -> ExtractedName:
    name_node = node.child_by_field_name('name')
    if name_node is None:
        return ExtractedName.failed()
    return ExtractedName.found(node_text(name_node, source))


def extract_c_declarator_name(node: Node, source: bytes) -> ExtractedName:
    # The name may sit under pointer, reference, array or qualified declarators.
    declarator = node.child_by_field_name('declarator')
    if declarator is None:
        return ExtractedName.failed()
    identifier = find_first(declarator, C_NAME_NODE_TYPES)
    if identifier is None:
        return ExtractedName.failed()
    return ExtractedName.found(node_text(identifier, source))


def is_cpp_special_member(node: Node) -> bool:
    """Operator overloads and destructors are structural, not logic."""
    declarator = node.child_by_field_name('declarator')
    if declarator is None:
        return False
    return find_first(declarator, CPP_SPECIAL_MEMBER_TYPES) is not None


def extract_js_function_name(node: Node, source: bytes) -> ExtractedName:
    name_node = node.child_by_field_name('name')
    if name_node is not None:
        return ExtractedName.found(node_text(name_node, source))

    # const handler = () => { ... }
    if node.type == 'arrow_function':
        parent = node.parent
        if parent is not None and parent.type == 'variable_declarator':
            declared = parent.child_by_field_name('name')
            if declared is not None:
                return ExtractedName.found(node_text(declared, source))

    return ExtractedName.anonymous()


def is_python_boolean_operator(node: Node) -> bool:
    return node.type == 'boolean_operator'


@dataclass(frozen=True)
class LanguageProfile:
    language: str
    function_types: FrozenSet[str]
    complexity_types: FrozenSet[str]
    name_extractor: NameExtractor = extract_name_field
    logical_operator: NodePredicate = is_binary_logical_operator
    exempt_function: NodePredicate = never_exempt

    def function_node_types(self) -> FrozenSet[str]:
        return self.function_types

    def complexity_node_types(self) -> FrozenSet[str]:
        return self.complexity_types

    def extract_name(self, node: Node, source: bytes) -> ExtractedName:
        return self.name_extractor(node, source)

    def is_logical_operator(self, node: Node) -> bool:
        return self.logical_operator(node)

    def is_exempt_function(self, node: Node) -> bool:
        return self.exempt_function(node)


C_PROFILE = LanguageProfile(
    language='c',
    function_types=frozenset({'function_definition'}),
    complexity_types=frozenset({
        'if_statement',
        'for_statement',
        'for_range_loop',
        'while_statement',
        'do_statement',
        'case_statement',
        'catch_clause',
        'conditional_expression',
    }),
    name_extractor=extract_c_declarator_name,
    exempt_function=is_cpp_special_member,
)

CPP_PROFILE = replace(C_PROFILE, language='cpp')

PYTHON_PROFILE = LanguageProfile(
    language='python',
    function_types=frozenset({'function_definition'}),
    complexity_types=frozenset({
        'if_statement',
        'elif_clause',
        'for_statement',
        'while_statement',
        'except_clause',
        'conditional_expression',
        'case_clause',
    }),
    logical_operator=is_python_boolean_operator,
)

JAVA_PROFILE = LanguageProfile(
    language='java',
    function_types=frozenset({'method_declaration', 'constructor_declaration'}),
    complexity_types=frozenset({
        'if_statement',
        'for_statement',
        'enhanced_for_statement',
        'while_statement',
        'do_statement',
        'switch_expression',
        'catch_clause',
        'ternary_expression',
    }),
)

RUST_PROFILE = LanguageProfile(
    language='rust',
    function_types=frozenset({'function_item'}),
    complexity_types=frozenset({
        'if_expression',
        'for_expression',
        'while_expression',
        'loop_expression',
        'match_arm',
    }),
)

GO_PROFILE = LanguageProfile(
    language='go',
    function_types=frozenset({'function_declaration', 'method_declaration'}),
    complexity_types=frozenset({
        'if_statement',
        'for_statement',
        'switch_statement',
        'expression_switch_statement',
        'type_switch_statement',
        'select_statement',
    }),
)

JAVASCRIPT_PROFILE = LanguageProfile(
    language='javascript',
    function_types=frozenset({
        'function_declaration',
        'function',
        'function_expression',
        'generator_function',
        'generator_function_declaration',
        'arrow_function',
        'method_definition',
    }),
    complexity_types=frozenset({
        'if_statement',
        'for_statement',
        'for_in_statement',
        'while_statement',
        'do_statement',
        'switch_case',
        'catch_clause',
        'ternary_expression',
    }),
    name_extractor=extract_js_function_name,
)

TYPESCRIPT_PROFILE = replace(JAVASCRIPT_PROFILE, language='typescript')

PROFILES: Dict[str, LanguageProfile] = {
    profile.language: profile
    for profile in (
        C_PROFILE,
        CPP_PROFILE,
        PYTHON_PROFILE,
        JAVA_PROFILE,
        RUST_PROFILE,
        GO_PROFILE,
        JAVASCRIPT_PROFILE,
        TYPESCRIPT_PROFILE,
    )
}


def get_profile(language: str) -> LanguageProfile:
    try:
        return PROFILES[language]
    except KeyError:
        raise UnsupportedLanguageError(language) from None
