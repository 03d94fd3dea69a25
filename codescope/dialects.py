"""
Language dialects and their lexical rules

Every supported language maps to one frozen DialectRules record holding
comment and string delimiters, block style, keyword and decision-point
tables, function-declaration patterns and the naming convention.
Patterns are compiled once at import time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from .errors import UnsupportedLanguageError


class LanguageDialect(str, Enum):
    """Supported source languages"""
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    GO = "go"
    C = "c"
    CPP = "cpp"
    CSHARP = "csharp"


class BlockStyle(str, Enum):
    BRACE = "brace"
    INDENT = "indent"


# ---------------------------------------------------------------------------
# Token alphabet
# ---------------------------------------------------------------------------
# Longest operators first so the alternation is maximal-munch.
OPERATORS: tuple[str, ...] = (
    '>>>=', '...', '===', '!==', '**=', '<<=', '>>=', '>>>', '//=',
    '?.', '??', '==', '!=', '<=', '>=', '&&', '||', '=>', '->', '::',
    '++', '--', '+=', '-=', '*=', '/=', '%=', '&=', '|=', '^=', '<<',
    '>>', '**', ':=', '//', '<-',
)

_STRING_BODIES = {
    '"': r'"(?:\\.|[^"\\\n])*"?',
    "'": r"'(?:\\.|[^'\\\n])*'?",
    '`': r'`(?:\\.|[^`\\])*`?',
}

_NUMBER = r'0[xXbBoO][0-9a-fA-F_]+|\d[\d_]*(?:\.\d*)?(?:[eE][+-]?\d+)?[a-zA-Z]*|\.\d+(?:[eE][+-]?\d+)?'
_WORD = r'[^\W\d][\w$]*|\$[\w$]*'


def _build_token_pattern(quotes: tuple[str, ...]) -> re.Pattern[str]:
    strings = '|'.join(_STRING_BODIES[q] for q in quotes)
    operators = '|'.join(re.escape(op) for op in OPERATORS)
    return re.compile(
        rf'(?P<string>{strings})'
        rf'|(?P<number>{_NUMBER})'
        rf'|(?P<word>{_WORD})'
        rf'|(?P<operator>{operators}|[^\s\w])'
    )


def _compile_patterns(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    """Compile regex pattern strings once at module level."""
    return tuple(re.compile(p) for p in patterns)


# Words that can precede a name in a declaration-looking line but are
# never return types.
NON_TYPE_WORDS: frozenset[str] = frozenset({
    'return', 'new', 'throw', 'else', 'case', 'await', 'yield', 'goto',
    'delete', 'in', 'of', 'typeof', 'sizeof', 'echo', 'print', 'not',
})


@dataclass(frozen=True)
class DialectRules:
    """Lexical and structural rules for one dialect.

    Attributes:
        dialect: The dialect these rules describe
        line_comment: Line comment marker, or None
        block_comment: (open, close) delimiters for block comments, or None
        docstring_delimiters: Triple-quote delimiters stripped like comments
        string_quotes: Characters that open a string literal
        multiline_quotes: Quotes whose literals may span lines
        block_style: Brace-delimited or indentation-delimited blocks
        keywords: Reserved words, classified as keyword tokens
        literal_words: Words classified as literal tokens (true, None, nil...)
        decision_points: Keyword and operator tokens that add a branch
        function_patterns: Declaration patterns, each with a ``name`` group
            and optionally an ``rtype`` group
        declaration_patterns: Variable declaration patterns with a ``name`` group
        function_name_pattern: Accepted shape of function names
        variable_name_pattern: Accepted shape of variable names
        naming_convention: Human readable convention name for explanations
        debug_output: Pattern for leftover debug printing, or None
        legacy_declaration: Pattern for discouraged declarations, or None
        typed_parameters: Angle brackets nest inside parameter lists
        indent_unit: Spaces per indentation level
    """

    dialect: LanguageDialect
    line_comment: str | None
    block_comment: tuple[str, str] | None
    string_quotes: tuple[str, ...]
    block_style: BlockStyle
    keywords: frozenset[str]
    decision_points: frozenset[str]
    function_patterns: tuple[re.Pattern[str], ...]
    declaration_patterns: tuple[re.Pattern[str], ...]
    function_name_pattern: re.Pattern[str]
    variable_name_pattern: re.Pattern[str]
    naming_convention: str
    docstring_delimiters: tuple[str, ...] = ()
    multiline_quotes: tuple[str, ...] = ()
    literal_words: frozenset[str] = frozenset({'true', 'false', 'null'})
    debug_output: re.Pattern[str] | None = None
    legacy_declaration: re.Pattern[str] | None = None
    typed_parameters: bool = False
    indent_unit: int = 4
    token_pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ for the derived field
        object.__setattr__(self, 'token_pattern', _build_token_pattern(self.string_quotes))

    @property
    def is_brace(self) -> bool:
        return self.block_style == BlockStyle.BRACE


# ---------------------------------------------------------------------------
# Naming shapes
# ---------------------------------------------------------------------------

_CAMEL = r'^_?[a-z][a-zA-Z0-9]*$'
_PASCAL = r'^[A-Z][a-zA-Z0-9]*$'
_SNAKE = r'^_{0,2}[a-z][a-z0-9_]*$'
_UPPER_SNAKE = r'^[A-Z][A-Z0-9_]*$'

CAMEL_OR_CONSTANT = re.compile(f'{_CAMEL}|{_PASCAL}|{_UPPER_SNAKE}')
PASCAL_ONLY = re.compile(_PASCAL)
SNAKE_OR_CONSTANT = re.compile(f'{_SNAKE}|{_UPPER_SNAKE}')
MIXED_CAPS = re.compile(f'{_CAMEL}|{_PASCAL}')
SNAKE_OR_CAMEL = re.compile(f'{_SNAKE}|{_CAMEL}|{_PASCAL}|{_UPPER_SNAKE}')


# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

_JS_KEYWORDS = frozenset({
    'async', 'await', 'break', 'case', 'catch', 'class', 'const', 'continue',
    'debugger', 'default', 'delete', 'do', 'else', 'export', 'extends',
    'finally', 'for', 'function', 'if', 'import', 'in', 'instanceof', 'let',
    'new', 'of', 'return', 'static', 'super', 'switch', 'this', 'throw',
    'try', 'typeof', 'var', 'void', 'while', 'with', 'yield',
})

_TS_KEYWORDS = _JS_KEYWORDS | frozenset({
    'abstract', 'any', 'as', 'boolean', 'declare', 'enum', 'implements',
    'interface', 'keyof', 'namespace', 'never', 'number', 'private',
    'protected', 'public', 'readonly', 'string', 'type', 'unknown',
})

_PYTHON_KEYWORDS = frozenset({
    'and', 'as', 'assert', 'async', 'await', 'break', 'case', 'class', 'continue',
    'def', 'del', 'elif', 'else', 'except', 'finally', 'for', 'from',
    'global', 'if', 'import', 'in', 'is', 'lambda', 'nonlocal', 'not', 'or',
    'pass', 'raise', 'return', 'try', 'while', 'with', 'yield',
})

_JAVA_KEYWORDS = frozenset({
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char',
    'class', 'const', 'continue', 'default', 'do', 'double', 'else', 'enum',
    'extends', 'final', 'finally', 'float', 'for', 'goto', 'if',
    'implements', 'import', 'instanceof', 'int', 'interface', 'long',
    'native', 'new', 'package', 'private', 'protected', 'public', 'return',
    'short', 'static', 'strictfp', 'super', 'switch', 'synchronized', 'this',
    'throw', 'throws', 'transient', 'try', 'void', 'volatile', 'while', 'var',
})

_GO_KEYWORDS = frozenset({
    'break', 'case', 'chan', 'const', 'continue', 'default', 'defer', 'else',
    'fallthrough', 'for', 'func', 'go', 'goto', 'if', 'import', 'interface',
    'map', 'package', 'range', 'return', 'select', 'struct', 'switch', 'type',
    'var',
})

_C_KEYWORDS = frozenset({
    'auto', 'break', 'case', 'char', 'const', 'continue', 'default', 'do',
    'double', 'else', 'enum', 'extern', 'float', 'for', 'goto', 'if',
    'inline', 'int', 'long', 'register', 'restrict', 'return', 'short',
    'signed', 'sizeof', 'static', 'struct', 'switch', 'typedef', 'union',
    'unsigned', 'void', 'volatile', 'while',
})

_CPP_KEYWORDS = _C_KEYWORDS | frozenset({
    'bool', 'catch', 'class', 'constexpr', 'delete', 'explicit', 'friend',
    'mutable', 'namespace', 'new', 'noexcept', 'nullptr', 'operator',
    'private', 'protected', 'public', 'template', 'this', 'throw', 'try',
    'typename', 'using', 'virtual',
})

_CSHARP_KEYWORDS = frozenset({
    'abstract', 'as', 'async', 'await', 'base', 'bool', 'break', 'byte',
    'case', 'catch', 'char', 'class', 'const', 'continue', 'decimal',
    'default', 'delegate', 'do', 'double', 'else', 'enum', 'event',
    'explicit', 'extern', 'finally', 'fixed', 'float', 'for', 'foreach',
    'goto', 'if', 'implicit', 'in', 'int', 'interface', 'internal', 'is',
    'lock', 'long', 'namespace', 'new', 'object', 'out', 'override',
    'params', 'private', 'protected', 'public', 'readonly', 'ref', 'return',
    'sealed', 'short', 'sizeof', 'static', 'string', 'struct', 'switch',
    'this', 'throw', 'try', 'typeof', 'uint', 'ulong', 'using', 'var',
    'virtual', 'void', 'while',
})

_C_FAMILY_DECISIONS = frozenset({'if', 'for', 'while', 'case', '&&', '||', '?'})


# ---------------------------------------------------------------------------
# Function declaration patterns
# ---------------------------------------------------------------------------
# Patterns are matched against single comment-stripped lines. Bounded
# quantifiers keep backtracking linear on long lines.

_JS_IDENT = r'[A-Za-z_$][\w$]{0,100}'

_JS_FUNCTION_PATTERNS = _compile_patterns((
    # function foo(...) / export default async function* foo(...)
    rf'^\s{{0,100}}(?:export\s{{1,20}})?(?:default\s{{1,20}})?(?:async\s{{1,20}})?function\s{{0,20}}\*?\s{{0,20}}(?P<name>{_JS_IDENT})\s{{0,20}}(?:<[^>]{{0,200}}>)?\s{{0,20}}\(',
    # const foo = function (...) / const foo = async function(...)
    rf'(?:const|let|var)\s{{1,20}}(?P<name>{_JS_IDENT})\s{{0,20}}(?::[^=]{{1,200}})?=\s{{0,20}}(?:async\s{{1,20}})?function\b',
    # const foo = (...) => / const foo = async x =>
    rf'(?:const|let|var)\s{{1,20}}(?P<name>{_JS_IDENT})\s{{0,20}}(?::[^=]{{1,200}})?=\s{{0,20}}(?:async\s{{1,20}})?(?:\([^)]{{0,300}}\)|{_JS_IDENT})\s{{0,20}}(?::\s{{0,20}}[^=]{{1,200}})?=>',
    # class methods: foo(...) {   static async foo(...) {
    rf'^\s{{0,100}}(?:(?:public|private|protected|static|async|readonly|override|get|set)\s{{1,20}}){{0,6}}(?P<name>{_JS_IDENT})\s{{0,20}}\([^)]{{0,300}}\)\s{{0,20}}(?::\s{{0,20}}[^{{]{{1,200}})?\{{',
))

_PYTHON_FUNCTION_PATTERNS = _compile_patterns((
    r'^\s{0,100}(?:async\s{1,20})?def\s{1,20}(?P<name>[^\W\d]\w{0,100})\s{0,20}(?:\[[^\]]{0,200}\])?\s{0,20}\(',
))

_GO_FUNCTION_PATTERNS = _compile_patterns((
    r'^\s{0,100}func\s{0,20}(?:\([^)]{0,200}\)\s{0,20})?(?P<name>[A-Za-z_]\w{0,100})\s{0,20}(?:\[[^\]]{0,200}\])?\s{0,20}\(',
))

_JAVA_FUNCTION_PATTERNS = _compile_patterns((
    r'^\s{0,100}(?:(?:public|private|protected|static|final|abstract|synchronized|native|default|strictfp)\s{1,20}){0,6}'
    r'(?:<[^>]{0,200}>\s{0,20})?(?P<rtype>[A-Za-z_$][\w$.]{0,100}(?:<[^;=()]{0,200}>)?(?:\[\]){0,4})\s{1,20}'
    r'(?P<name>[A-Za-z_$][\w$]{0,100})\s{0,20}\([^;]{0,300}$',
))

_CSHARP_FUNCTION_PATTERNS = _compile_patterns((
    r'^\s{0,100}(?:(?:public|private|protected|internal|static|virtual|override|abstract|async|sealed|extern|unsafe|partial|new|readonly)\s{1,20}){0,6}'
    r'(?P<rtype>[A-Za-z_][\w.]{0,100}(?:<[^;=()]{0,200}>)?(?:\[\]){0,4}\??)\s{1,20}'
    r'(?P<name>[A-Za-z_]\w{0,100})\s{0,20}(?:<[^>]{0,200}>)?\s{0,20}\([^;]{0,300}$',
))

_C_FUNCTION_PATTERNS = _compile_patterns((
    r'^\s{0,100}(?:(?:static|inline|extern|const|unsigned|signed|struct|enum|virtual|constexpr|explicit|friend)\s{1,20}){0,6}'
    r'(?P<rtype>[A-Za-z_][\w:]{0,100}(?:<[^;=()]{0,200}>)?)[\s*&]{1,20}'
    r'(?P<name>[A-Za-z_~][\w:~]{0,100})\s{0,20}\([^;]{0,300}$',
))


# ---------------------------------------------------------------------------
# Variable declaration patterns (for naming checks)
# ---------------------------------------------------------------------------

_JS_DECLARATIONS = _compile_patterns((
    rf'\b(?:const|let|var)\s{{1,20}}(?P<name>{_JS_IDENT})\b',
))

_PYTHON_DECLARATIONS = _compile_patterns((
    r'^\s{0,100}(?P<name>[^\W\d]\w{0,100})\s{0,20}(?::[^=]{1,100})?=(?!=)',
))

_GO_DECLARATIONS = _compile_patterns((
    r'\bvar\s{1,20}(?P<name>[A-Za-z_]\w{0,100})\b',
    r'^\s{0,100}(?P<name>[A-Za-z_]\w{0,100})\s{0,20}:=',
))

_TYPED_DECLARATIONS = _compile_patterns((
    r'^\s{0,100}(?:(?:final|const|static|readonly|private|public|protected)\s{1,20}){0,4}'
    r'(?:int|long|short|char|float|double|bool|boolean|byte|string|String|var|auto|unsigned|size_t)\s{1,20}\*?'
    r'(?P<name>[A-Za-z_]\w{0,100})\s{0,20}(?:=|;|\[)',
))


# ---------------------------------------------------------------------------
# Dialect table
# ---------------------------------------------------------------------------

_JS_DEBUG = re.compile(r'\bconsole\.(?:log|debug|trace)\s{0,20}\(')

DIALECT_RULES: dict[LanguageDialect, DialectRules] = {
    LanguageDialect.JAVASCRIPT: DialectRules(
        dialect=LanguageDialect.JAVASCRIPT,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'", '`'),
        multiline_quotes=('`',),
        block_style=BlockStyle.BRACE,
        keywords=_JS_KEYWORDS,
        literal_words=frozenset({'true', 'false', 'null', 'undefined', 'NaN'}),
        decision_points=_C_FAMILY_DECISIONS | {'catch', '??'},
        function_patterns=_JS_FUNCTION_PATTERNS,
        declaration_patterns=_JS_DECLARATIONS,
        function_name_pattern=CAMEL_OR_CONSTANT,
        variable_name_pattern=CAMEL_OR_CONSTANT,
        naming_convention='camelCase',
        debug_output=_JS_DEBUG,
        legacy_declaration=re.compile(r'\bvar\s{1,20}[A-Za-z_$]'),
    ),
    LanguageDialect.TYPESCRIPT: DialectRules(
        dialect=LanguageDialect.TYPESCRIPT,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'", '`'),
        multiline_quotes=('`',),
        block_style=BlockStyle.BRACE,
        keywords=_TS_KEYWORDS,
        literal_words=frozenset({'true', 'false', 'null', 'undefined', 'NaN'}),
        decision_points=_C_FAMILY_DECISIONS | {'catch', '??'},
        function_patterns=_JS_FUNCTION_PATTERNS,
        declaration_patterns=_JS_DECLARATIONS,
        function_name_pattern=CAMEL_OR_CONSTANT,
        variable_name_pattern=CAMEL_OR_CONSTANT,
        naming_convention='camelCase',
        debug_output=_JS_DEBUG,
        legacy_declaration=re.compile(r'\bvar\s{1,20}[A-Za-z_$]'),
        typed_parameters=True,
    ),
    LanguageDialect.PYTHON: DialectRules(
        dialect=LanguageDialect.PYTHON,
        line_comment='#',
        block_comment=None,
        docstring_delimiters=('"""', "'''"),
        string_quotes=('"', "'"),
        block_style=BlockStyle.INDENT,
        keywords=_PYTHON_KEYWORDS,
        literal_words=frozenset({'True', 'False', 'None'}),
        decision_points=frozenset({'if', 'elif', 'for', 'while', 'except', 'case', 'and', 'or'}),
        function_patterns=_PYTHON_FUNCTION_PATTERNS,
        declaration_patterns=_PYTHON_DECLARATIONS,
        function_name_pattern=SNAKE_OR_CONSTANT,
        variable_name_pattern=SNAKE_OR_CONSTANT,
        naming_convention='snake_case',
        debug_output=re.compile(r'(?<![\w.])print\s{0,20}\('),
    ),
    LanguageDialect.JAVA: DialectRules(
        dialect=LanguageDialect.JAVA,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'"),
        block_style=BlockStyle.BRACE,
        keywords=_JAVA_KEYWORDS,
        decision_points=_C_FAMILY_DECISIONS | {'catch'},
        function_patterns=_JAVA_FUNCTION_PATTERNS,
        declaration_patterns=_TYPED_DECLARATIONS,
        function_name_pattern=CAMEL_OR_CONSTANT,
        variable_name_pattern=CAMEL_OR_CONSTANT,
        naming_convention='camelCase',
        debug_output=re.compile(r'\bSystem\.(?:out|err)\.print(?:ln|f)?\s{0,20}\('),
        typed_parameters=True,
    ),
    LanguageDialect.GO: DialectRules(
        dialect=LanguageDialect.GO,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'", '`'),
        multiline_quotes=('`',),
        block_style=BlockStyle.BRACE,
        keywords=_GO_KEYWORDS,
        literal_words=frozenset({'true', 'false', 'nil', 'iota'}),
        decision_points=frozenset({'if', 'for', 'case', '&&', '||'}),
        function_patterns=_GO_FUNCTION_PATTERNS,
        declaration_patterns=_GO_DECLARATIONS,
        function_name_pattern=MIXED_CAPS,
        variable_name_pattern=MIXED_CAPS,
        naming_convention='mixedCaps',
        debug_output=re.compile(r'\bfmt\.Print(?:ln|f)?\s{0,20}\('),
        typed_parameters=True,
    ),
    LanguageDialect.C: DialectRules(
        dialect=LanguageDialect.C,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'"),
        block_style=BlockStyle.BRACE,
        keywords=_C_KEYWORDS,
        literal_words=frozenset({'NULL', 'true', 'false'}),
        decision_points=_C_FAMILY_DECISIONS,
        function_patterns=_C_FUNCTION_PATTERNS,
        declaration_patterns=_TYPED_DECLARATIONS,
        function_name_pattern=SNAKE_OR_CAMEL,
        variable_name_pattern=SNAKE_OR_CAMEL,
        naming_convention='snake_case',
        debug_output=re.compile(r'\bprintf\s{0,20}\(\s{0,20}"(?:DEBUG|debug)'),
    ),
    LanguageDialect.CPP: DialectRules(
        dialect=LanguageDialect.CPP,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'"),
        block_style=BlockStyle.BRACE,
        keywords=_CPP_KEYWORDS,
        literal_words=frozenset({'NULL', 'nullptr', 'true', 'false'}),
        decision_points=_C_FAMILY_DECISIONS | {'catch'},
        function_patterns=_C_FUNCTION_PATTERNS,
        declaration_patterns=_TYPED_DECLARATIONS,
        function_name_pattern=SNAKE_OR_CAMEL,
        variable_name_pattern=SNAKE_OR_CAMEL,
        naming_convention='snake_case or camelCase',
        debug_output=re.compile(r'\bstd::(?:cout|cerr)\s{0,20}<<'),
        typed_parameters=True,
    ),
    LanguageDialect.CSHARP: DialectRules(
        dialect=LanguageDialect.CSHARP,
        line_comment='//',
        block_comment=('/*', '*/'),
        string_quotes=('"', "'"),
        block_style=BlockStyle.BRACE,
        keywords=_CSHARP_KEYWORDS,
        decision_points=_C_FAMILY_DECISIONS | {'catch', 'foreach', '??'},
        function_patterns=_CSHARP_FUNCTION_PATTERNS,
        declaration_patterns=_TYPED_DECLARATIONS,
        function_name_pattern=PASCAL_ONLY,
        variable_name_pattern=CAMEL_OR_CONSTANT,
        naming_convention='PascalCase methods, camelCase locals',
        debug_output=re.compile(r'\bConsole\.Write(?:Line)?\s{0,20}\('),
        typed_parameters=True,
    ),
}

# Every dialect must have rules; a missing entry is a programming error.
_missing = set(LanguageDialect) - set(DIALECT_RULES)
if _missing:
    raise RuntimeError(f"Missing dialect rules for: {sorted(d.value for d in _missing)}")


_ALIASES: dict[str, LanguageDialect] = {
    'js': LanguageDialect.JAVASCRIPT,
    'jsx': LanguageDialect.JAVASCRIPT,
    'ts': LanguageDialect.TYPESCRIPT,
    'tsx': LanguageDialect.TYPESCRIPT,
    'py': LanguageDialect.PYTHON,
    'jupyter': LanguageDialect.PYTHON,
    'golang': LanguageDialect.GO,
    'c++': LanguageDialect.CPP,
    'cs': LanguageDialect.CSHARP,
    'c#': LanguageDialect.CSHARP,
}


def get_rules(dialect: LanguageDialect) -> DialectRules:
    return DIALECT_RULES[dialect]


def resolve_dialect(language_id: str | LanguageDialect) -> LanguageDialect:
    """Map a language id (dialect name or alias) to a dialect.

    Raises:
        UnsupportedLanguageError: If the id names no known dialect
    """
    if isinstance(language_id, LanguageDialect):
        return language_id
    key = (language_id or '').strip().lower()
    try:
        return LanguageDialect(key)
    except ValueError:
        pass
    if key in _ALIASES:
        return _ALIASES[key]
    raise UnsupportedLanguageError(language_id)
