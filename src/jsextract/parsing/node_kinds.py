"""Tree-sitter JavaScript node kinds the extractor understands."""

from enum import Enum


class NodeRole(Enum):
    """Semantic role of a node kind."""

    DECLARATION = "declaration"
    MODIFIER = "modifier"
    IDENTIFIER = "identifier"
    BODY = "body"
    OTHER = "other"


class NodeKind(str, Enum):
    """Grammar node types, keyed by their tree-sitter type string.

    Any type not listed here maps to UNHANDLED, so ``NodeKind(node.type)``
    never raises.
    """

    # Top level and comments
    PROGRAM = "program"
    COMMENT = "comment"

    # Modules
    IMPORT_STATEMENT = "import_statement"
    IMPORT_CLAUSE = "import_clause"
    NAMESPACE_IMPORT = "namespace_import"
    NAMED_IMPORTS = "named_imports"
    IMPORT_SPECIFIER = "import_specifier"
    EXPORT_STATEMENT = "export_statement"
    EXPORT_CLAUSE = "export_clause"
    EXPORT_SPECIFIER = "export_specifier"
    IMPORT = "import"

    # Declarations
    FUNCTION_DECLARATION = "function_declaration"
    GENERATOR_FUNCTION_DECLARATION = "generator_function_declaration"
    CLASS_DECLARATION = "class_declaration"
    LEXICAL_DECLARATION = "lexical_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    METHOD_DEFINITION = "method_definition"
    FIELD_DEFINITION = "field_definition"

    # Class parts
    CLASS_HERITAGE = "class_heritage"
    CLASS_BODY = "class_body"

    # Function values
    FUNCTION_EXPRESSION = "function_expression"
    GENERATOR_FUNCTION = "generator_function"
    ARROW_FUNCTION = "arrow_function"
    FORMAL_PARAMETERS = "formal_parameters"
    STATEMENT_BLOCK = "statement_block"

    # Expressions and statements
    EXPRESSION_STATEMENT = "expression_statement"
    ASSIGNMENT_EXPRESSION = "assignment_expression"
    CALL_EXPRESSION = "call_expression"
    NEW_EXPRESSION = "new_expression"
    MEMBER_EXPRESSION = "member_expression"
    ARGUMENTS = "arguments"
    STRING = "string"
    STRING_FRAGMENT = "string_fragment"
    TEMPLATE_STRING = "template_string"

    # Names and patterns
    IDENTIFIER = "identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    PRIVATE_PROPERTY_IDENTIFIER = "private_property_identifier"
    OBJECT_PATTERN = "object_pattern"
    ARRAY_PATTERN = "array_pattern"
    SHORTHAND_PROPERTY_IDENTIFIER_PATTERN = "shorthand_property_identifier_pattern"
    PAIR_PATTERN = "pair_pattern"
    REST_PATTERN = "rest_pattern"
    ASSIGNMENT_PATTERN = "assignment_pattern"

    # Keywords and modifiers
    ASYNC = "async"
    STATIC = "static"
    STAR = "*"
    CONST = "const"
    LET = "let"
    VAR = "var"
    DEFAULT = "default"
    THIS = "this"

    UNHANDLED = ""

    @classmethod
    def _missing_(cls, value):
        return cls.UNHANDLED

    @property
    def role(self) -> NodeRole:
        """Semantic role of this kind."""
        return _ROLES.get(self, NodeRole.OTHER)

    @property
    def is_function_value(self) -> bool:
        """True for function and arrow expressions usable as method bodies."""
        return self in _FUNCTION_VALUES


_ROLES = {
    NodeKind.FUNCTION_DECLARATION: NodeRole.DECLARATION,
    NodeKind.GENERATOR_FUNCTION_DECLARATION: NodeRole.DECLARATION,
    NodeKind.CLASS_DECLARATION: NodeRole.DECLARATION,
    NodeKind.LEXICAL_DECLARATION: NodeRole.DECLARATION,
    NodeKind.VARIABLE_DECLARATION: NodeRole.DECLARATION,
    NodeKind.IMPORT_STATEMENT: NodeRole.DECLARATION,
    NodeKind.EXPORT_STATEMENT: NodeRole.DECLARATION,
    NodeKind.METHOD_DEFINITION: NodeRole.DECLARATION,
    NodeKind.FIELD_DEFINITION: NodeRole.DECLARATION,
    NodeKind.ASYNC: NodeRole.MODIFIER,
    NodeKind.STATIC: NodeRole.MODIFIER,
    NodeKind.STAR: NodeRole.MODIFIER,
    NodeKind.CONST: NodeRole.MODIFIER,
    NodeKind.LET: NodeRole.MODIFIER,
    NodeKind.VAR: NodeRole.MODIFIER,
    NodeKind.DEFAULT: NodeRole.MODIFIER,
    NodeKind.IDENTIFIER: NodeRole.IDENTIFIER,
    NodeKind.PROPERTY_IDENTIFIER: NodeRole.IDENTIFIER,
    NodeKind.PRIVATE_PROPERTY_IDENTIFIER: NodeRole.IDENTIFIER,
    NodeKind.STATEMENT_BLOCK: NodeRole.BODY,
    NodeKind.CLASS_BODY: NodeRole.BODY,
}

_FUNCTION_VALUES = frozenset(
    {NodeKind.FUNCTION_EXPRESSION, NodeKind.GENERATOR_FUNCTION, NodeKind.ARROW_FUNCTION}
)


def classify(node) -> NodeKind:
    """Map a tree-sitter node to its NodeKind (UNHANDLED if unknown)."""
    if node is None:
        return NodeKind.UNHANDLED
    return NodeKind(node.type)
