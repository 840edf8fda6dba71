"""JavaScript parser tests."""

import hashlib
import threading
from pathlib import Path

import pytest
from hypothesis import given, settings, strategies as st

from jsextract.config import ParserConfig
from jsextract.parsing import SymbolKind
from jsextract.parsing.errors import (
    FileTooLargeError,
    InvalidContentError,
    ParseCanceledError,
    ParseError,
)
from jsextract.parsing.javascript_parser import JavaScriptParser


def test_parser_supported_extensions(parser):
    """Parser supports plain, module, CommonJS and JSX files."""
    assert ".js" in parser.supported_extensions
    assert ".mjs" in parser.supported_extensions
    assert ".cjs" in parser.supported_extensions
    assert ".jsx" in parser.supported_extensions
    assert ".ts" not in parser.supported_extensions


def test_can_parse_by_extension(parser):
    """can_parse checks the suffix case-insensitively."""
    assert parser.can_parse(Path("lib/router/index.js"))
    assert parser.can_parse(Path("App.JSX"))
    assert not parser.can_parse(Path("main.py"))


def test_result_metadata(parser):
    """Result carries path, language, content hash and timestamp."""
    content = b"const a = 1;\n"
    result = parser.parse(content, "src/a.js")

    assert result.file_path == "src/a.js"
    assert result.language == "javascript"
    assert result.hash == hashlib.sha256(content).hexdigest()
    assert result.parsed_at > 0
    assert result.errors == []


def test_empty_file(parser):
    """Empty input yields an empty, valid result."""
    result = parser.parse(b"", "empty.js")

    assert result.symbols == []
    assert result.imports == []
    assert result.errors == []


def test_default_config_comes_from_settings():
    """Parser without explicit config uses the loaded settings."""
    parser = JavaScriptParser()
    assert parser.config == ParserConfig()


# =============================================================================
# Hard failures
# =============================================================================


def test_rejects_oversized_input():
    """Inputs above max_file_size_bytes raise FileTooLargeError."""
    parser = JavaScriptParser(ParserConfig(max_file_size_bytes=10))

    with pytest.raises(FileTooLargeError):
        parser.parse(b"const abc = 1;", "big.js")


def test_accepts_input_at_size_limit():
    """An input exactly at the limit is parsed."""
    content = b"var a = 1;"
    parser = JavaScriptParser(ParserConfig(max_file_size_bytes=len(content)))

    result = parser.parse(content, "a.js")
    assert result.find_symbol("a") is not None


def test_rejects_invalid_utf8(parser):
    """Non-UTF-8 input raises InvalidContentError."""
    with pytest.raises(InvalidContentError):
        parser.parse(b"var s = '\xff\xfe';", "bad.js")


def test_cancelled_before_start(parser):
    """A token that is already set aborts the parse."""
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ParseCanceledError):
        parser.parse(b"function f() {}", "f.js", cancel)


def test_hard_failures_share_base_class(parser):
    """All hard failures are ParseError subclasses."""
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ParseError):
        parser.parse(b"", "f.js", cancel)


def test_unset_token_does_not_cancel(parser):
    """A token that is never set leaves the parse untouched."""
    result = parser.parse(b"function f() { g(); }", "f.js", threading.Event())

    assert [c.target for c in result.find_symbol("f").calls] == ["g"]


# =============================================================================
# Functions
# =============================================================================


def test_parses_function_declaration(parser):
    """Extracts function declarations with signature, doc comment and calls."""
    code = """
/** Greets someone. */
async function greet(name, greeting = "hi", ...rest) {
    console.log(name);
    return format(name, done);
}
"""
    result = parser.parse_string(code, "greet.js")

    func = result.find_symbol("greet")
    assert func.kind == SymbolKind.FUNCTION
    assert func.id == "greet.js:3:greet"
    assert func.start_line == 3
    assert func.end_line == 6
    assert func.signature == "async function greet(name, greeting, ...rest)"
    assert func.doc_comment == "/** Greets someone. */"
    assert func.exported is False
    assert func.metadata.is_async is True
    assert func.metadata.is_generator is False
    assert [c.target for c in func.calls] == ["log", "format"]
    assert func.calls[0].receiver == "console"
    assert func.calls[0].is_method is True
    assert func.calls[1].function_args == ["name", "done"]


def test_parses_generator_function(parser):
    """Generator declarations are flagged and rendered with a star."""
    code = """
function* ids() {
    yield next();
}
"""
    result = parser.parse_string(code, "gen.js")

    func = result.find_symbol("ids")
    assert func.kind == SymbolKind.FUNCTION
    assert func.signature == "function* ids()"
    assert func.metadata.is_generator is True


def test_plain_function_has_no_metadata(parser):
    """Metadata is only attached when a flag is set."""
    result = parser.parse_string("function add(a, b) { return a + b; }", "add.js")

    func = result.find_symbol("add")
    assert func.metadata is None
    assert func.calls == []


def test_non_doc_comment_is_ignored(parser):
    """Line comments and plain block comments are not doc comments."""
    code = """
// helper
function a() {}
/* not a doc */
function b() {}
"""
    result = parser.parse_string(code, "c.js")

    assert result.find_symbol("a").doc_comment == ""
    assert result.find_symbol("b").doc_comment == ""


def test_finds_declarations_nested_in_expressions(parser):
    """Declarations inside an IIFE are still extracted."""
    code = """
(function () {
    function inner() {
        work();
    }
})();
"""
    result = parser.parse_string(code, "iife.js")

    inner = result.find_symbol("inner")
    assert inner is not None
    assert [c.target for c in inner.calls] == ["work"]


def test_callback_bodies_are_searched_like_wrappers(parser):
    """Function arguments are not owned by a declaration, so their locals surface."""
    code = """
app.get('/', function (req, res) {
    var user = loadUser(req);
    res.send(user);
});
"""
    result = parser.parse_string(code, "app.js")

    user = result.find_symbol("user")
    assert user.kind == SymbolKind.VARIABLE
    assert user.exported is False


def test_does_not_extract_declarations_nested_in_functions(parser):
    """A function body belongs to its function and is not searched again."""
    code = """
function outer() {
    function helper() {}
    helper();
}
"""
    result = parser.parse_string(code, "nested.js")

    assert result.find_symbol("outer") is not None
    assert result.find_symbol("helper") is None


# =============================================================================
# Constructor functions
# =============================================================================


def test_constructor_function_promoted_to_class(parser):
    """Upper-case functions assigning this.<x> become classes."""
    code = """
function Router(options) {
    this.stack = [];
    this.params = {};
}
"""
    result = parser.parse_string(code, "router.js")

    sym = result.find_symbol("Router")
    assert sym.kind == SymbolKind.CLASS
    assert sym.metadata.is_constructor is True
    assert sym.signature == "function Router(options)"


def test_lowercase_function_not_promoted(parser):
    """A lower-case name is never a constructor."""
    result = parser.parse_string("function router() { this.stack = []; }", "r.js")

    sym = result.find_symbol("router")
    assert sym.kind == SymbolKind.FUNCTION
    assert sym.metadata is None


def test_constructor_needs_this_assignment(parser):
    """An upper-case function without this.<x> stays a function."""
    result = parser.parse_string("function Factory() { return {}; }", "f.js")

    assert result.find_symbol("Factory").kind == SymbolKind.FUNCTION


def test_this_assignment_in_nested_block_counts(parser):
    """Plain nested blocks are searched for this.<x> assignments."""
    result = parser.parse_string("function Boxed() { { this.value = 1; } }", "b.js")

    assert result.find_symbol("Boxed").kind == SymbolKind.CLASS


def test_this_assignment_in_conditional_does_not_count(parser):
    """Assignments under if statements are outside the searched statements."""
    code = """
function Lazy(opts) {
    if (opts) {
        this.opts = opts;
    }
}
"""
    result = parser.parse_string(code, "lazy.js")

    assert result.find_symbol("Lazy").kind == SymbolKind.FUNCTION


def test_this_assignment_in_nested_function_does_not_count(parser):
    """A this.<x> assignment inside a callback belongs to the callback."""
    code = """
function Wrapper() {
    run(function () {
        this.ready = true;
    });
}
"""
    result = parser.parse_string(code, "w.js")

    assert result.find_symbol("Wrapper").kind == SymbolKind.FUNCTION


# =============================================================================
# Classes
# =============================================================================

CLASS_CODE = """
/** Routes requests. */
class Router extends EventEmitter {
    static create(opts) {
        return new Router(opts);
    }

    constructor() {
        super();
        this.stack = [];
    }

    async handle(req, res) {
        await this.dispatch(req);
    }

    *entries() {}

    #secret() {}

    count = 0;
    onClick = () => {
        this.emit("click");
    };
    static #instances = 0;
}
"""


def test_parses_class_declaration(parser):
    """Extracts the class with heritage, doc comment and signature."""
    result = parser.parse_string(CLASS_CODE, "router.js")

    cls = result.find_symbol("Router", SymbolKind.CLASS)
    assert cls.signature == "class Router extends EventEmitter"
    assert cls.doc_comment == "/** Routes requests. */"
    assert cls.metadata.extends == "EventEmitter"
    assert cls.start_line == 3


def test_class_members_become_children(parser):
    """Methods and fields are children, not top-level symbols."""
    result = parser.parse_string(CLASS_CODE, "router.js")

    cls = result.find_symbol("Router", SymbolKind.CLASS)
    assert [c.name for c in cls.children] == [
        "create",
        "constructor",
        "handle",
        "entries",
        "#secret",
        "count",
        "onClick",
        "#instances",
    ]
    assert all(c.receiver == "Router" for c in cls.children)
    assert result.find_symbol("handle") is None


def test_class_method_details(parser):
    """Method signatures, IDs, modifiers and calls."""
    result = parser.parse_string(CLASS_CODE, "router.js")
    members = {c.name: c for c in result.find_symbol("Router").children}

    create = members["create"]
    assert create.kind == SymbolKind.METHOD
    assert create.id == "router.js:4:Router.create"
    assert create.signature == "static create(opts)"
    assert create.metadata.is_static is True
    assert [c.target for c in create.calls] == ["Router"]

    handle = members["handle"]
    assert handle.signature == "async handle(req, res)"
    assert handle.metadata.is_async is True
    assert handle.calls[0].target == "dispatch"
    assert handle.calls[0].receiver == "this"

    assert members["entries"].signature == "entries*()"
    assert members["entries"].metadata.is_generator is True


def test_private_members(parser):
    """#private members are kept but unexported with a private access modifier."""
    result = parser.parse_string(CLASS_CODE, "router.js")
    members = {c.name: c for c in result.find_symbol("Router").children}

    secret = members["#secret"]
    assert secret.exported is False
    assert secret.metadata.access_modifier == "private"

    instances = members["#instances"]
    assert instances.kind == SymbolKind.FIELD
    assert instances.signature == "static #instances"
    assert instances.metadata.access_modifier == "private"
    assert instances.metadata.is_static is True

    assert members["handle"].exported is True


def test_fields_and_properties(parser):
    """Plain fields are Field; function-valued fields are Property with calls."""
    result = parser.parse_string(CLASS_CODE, "router.js")
    members = {c.name: c for c in result.find_symbol("Router").children}

    assert members["count"].kind == SymbolKind.FIELD
    assert members["count"].signature == "count"
    assert members["count"].calls == []

    on_click = members["onClick"]
    assert on_click.kind == SymbolKind.PROPERTY
    assert [c.target for c in on_click.calls] == ["emit"]


def test_class_methods_metadata_skips_constructor(parser):
    """metadata.methods lists non-constructor methods only."""
    result = parser.parse_string(CLASS_CODE, "router.js")

    cls = result.find_symbol("Router")
    names = [m.name for m in cls.metadata.methods]
    assert names == ["create", "handle", "entries", "#secret"]
    assert cls.metadata.methods[0].signature == "static create(opts)"


def test_class_extending_member_expression(parser):
    """Heritage written as a dotted name is kept as text."""
    result = parser.parse_string("class View extends Backbone.View {}", "view.js")

    cls = result.find_symbol("View")
    assert cls.signature == "class View extends Backbone.View"
    assert cls.metadata.extends == "Backbone.View"


def test_class_without_members(parser):
    """A bare class has no children and no metadata."""
    result = parser.parse_string("class Empty {}", "empty.js")

    cls = result.find_symbol("Empty")
    assert cls.children == []
    assert cls.metadata is None


# =============================================================================
# Variables
# =============================================================================


def test_variable_kinds(parser):
    """const is Constant; let and var are Variable."""
    code = """
const LIMIT = 10;
let counter = 0;
var legacy = true;
"""
    result = parser.parse_string(code, "vars.js")

    assert result.find_symbol("LIMIT").kind == SymbolKind.CONSTANT
    assert result.find_symbol("LIMIT").signature == "const LIMIT"
    assert result.find_symbol("counter").kind == SymbolKind.VARIABLE
    assert result.find_symbol("counter").signature == "let counter"
    assert result.find_symbol("legacy").signature == "var legacy"


def test_multiple_declarators(parser):
    """Each declarator yields its own symbol."""
    result = parser.parse_string("let a = 1, b = 2;", "multi.js")

    assert [s.name for s in result.symbols] == ["a", "b"]


def test_arrow_function_variable(parser):
    """Arrow initializers become functions with their body walked."""
    code = """
/** Adds. */
const add = async (a, b) => {
    return sum(a, b);
};
const double = x => multiply(x, 2);
"""
    result = parser.parse_string(code, "arrows.js")

    add = result.find_symbol("add")
    assert add.kind == SymbolKind.FUNCTION
    assert add.signature == "const add = async (a, b) => {}"
    assert add.doc_comment == "/** Adds. */"
    assert add.metadata.is_async is True
    assert [c.target for c in add.calls] == ["sum"]

    double = result.find_symbol("double")
    assert double.kind == SymbolKind.FUNCTION
    assert double.signature == "const double = (x) => {}"
    assert [c.target for c in double.calls] == ["multiply"]


def test_destructuring_declaration_is_skipped(parser):
    """Declarators without a single name produce no symbol."""
    result = parser.parse_string("const { a, b } = obj;", "d.js")

    assert result.symbols == []


# =============================================================================
# Exports
# =============================================================================


def test_export_marks_declarations(parser):
    """Declarations wrapped in export are exported."""
    code = """
/** Adds two numbers. */
export function add(a, b) { return a + b; }
export class Stack {}
export const MAX = 10;
function internal() {}
"""
    result = parser.parse_string(code, "math.js")

    add = result.find_symbol("add")
    assert add.exported is True
    assert add.doc_comment == "/** Adds two numbers. */"
    assert result.find_symbol("Stack").exported is True
    assert result.find_symbol("MAX").exported is True
    assert result.find_symbol("MAX").kind == SymbolKind.CONSTANT
    assert result.find_symbol("internal").exported is False


def test_export_default_identifier(parser):
    """export default <name> yields an exported variable."""
    code = """
function App() {}
export default App;
"""
    result = parser.parse_string(code, "App.jsx")

    exported = [s for s in result.symbols if s.kind == SymbolKind.VARIABLE]
    assert len(exported) == 1
    assert exported[0].name == "App"
    assert exported[0].exported is True
    assert exported[0].start_line == 3


def test_export_clause(parser):
    """Each export specifier yields an exported variable."""
    code = """
const a = 1;
const b = 2;
export { a, b as bee };
"""
    result = parser.parse_string(code, "ab.js")

    exported = [s.name for s in result.symbols if s.kind == SymbolKind.VARIABLE]
    assert exported == ["a", "b"]
    assert all(s.exported for s in result.symbols if s.kind == SymbolKind.VARIABLE)


def test_reexports_become_imports(parser):
    """export ... from 'path' records the source module."""
    code = """
export { parse, format } from './codec';
export * from '../shared';
"""
    result = parser.parse_string(code, "index.js")

    paths = [imp.path for imp in result.imports]
    assert paths == ["./codec", "../shared"]
    assert all(imp.is_relative for imp in result.imports)
    names = [s.name for s in result.symbols if s.kind == SymbolKind.VARIABLE]
    assert names == ["parse", "format"]


# =============================================================================
# Privacy
# =============================================================================


def test_include_private_false_keeps_exported_and_imports():
    """With include_private off, only exported symbols and imports remain."""
    code = """
import helper from './helper';
function hidden() {}
export function shown() {}
function View() {}
module.exports = View;
"""
    parser = JavaScriptParser(ParserConfig(include_private=False))
    result = parser.parse_string(code, "lib/thing.js")

    names = {s.name for s in result.symbols}
    assert "hidden" not in names
    assert "shown" in names
    assert "./helper" in names
    # Exported later through module.exports, so it survives the filter
    assert result.find_symbol("View", SymbolKind.FUNCTION).exported is True


def test_include_private_true_keeps_everything(parser):
    """By default non-exported symbols are kept."""
    result = parser.parse_string("function hidden() {}", "h.js")

    assert result.find_symbol("hidden") is not None


# =============================================================================
# Determinism
# =============================================================================

EXPRESS_LIKE = """
var EventEmitter = require('events').EventEmitter;
var mixin = require('merge-descriptors');
var proto = require('./application');

exports = module.exports = createApplication;

function createApplication() {
    var app = function (req, res, next) {
        app.handle(req, res, next);
    };
    mixin(app, EventEmitter.prototype, false);
    mixin(app, proto, false);
    app.init();
    return app;
}

exports.query = require('./middleware/query');
"""


def test_parse_is_deterministic(parser):
    """The same input yields identical symbols, imports and hash."""
    first = parser.parse_string(EXPRESS_LIKE, "lib/express.js")
    second = parser.parse_string(EXPRESS_LIKE, "lib/express.js")

    assert first.symbols == second.symbols
    assert first.imports == second.imports
    assert first.hash == second.hash
    assert first.errors == second.errors == []


def test_hash_changes_with_content(parser):
    """A one-byte change produces a different hash."""
    first = parser.parse(b"var a = 1;", "a.js")
    second = parser.parse(b"var a = 2;", "a.js")

    assert first.hash != second.hash


def test_express_like_module(parser):
    """A realistic CommonJS entry module extracts its imports and exports."""
    result = parser.parse_string(EXPRESS_LIKE, "lib/express.js")

    create = result.find_symbol("createApplication")
    assert create.kind == SymbolKind.FUNCTION
    assert [c.target for c in create.calls] == ["handle", "mixin", "mixin", "init"]
    assert create.calls[1].function_args == ["app", "EventEmitter.prototype"]

    by_alias = {imp.alias: imp for imp in result.imports}
    assert by_alias["EventEmitter"].names == ["EventEmitter"]
    assert by_alias["proto"].is_relative is True
    assert by_alias["query"].path == "./middleware/query"
    assert by_alias["query"].is_common_js is True


JS_KEYWORDS = {
    "do", "if", "in", "for", "let", "new", "try", "var", "case", "else", "enum",
    "this", "void", "with", "await", "break", "catch", "class", "const", "super",
    "throw", "while", "yield", "delete", "export", "import", "return", "static",
    "switch", "typeof", "default", "extends", "finally", "package", "private",
    "continue", "debugger", "function", "arguments", "interface", "protected",
    "implements", "instanceof", "public", "null", "true", "false", "async", "of",
    "get", "set", "undefined",
}

COMMENT_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 .,"

IDENTIFIERS = st.from_regex(r"[a-z][a-zA-Z0-9_]{0,15}", fullmatch=True).filter(
    lambda name: name not in JS_KEYWORDS
)


@given(name=IDENTIFIERS, callee=IDENTIFIERS)
@settings(max_examples=50, deadline=None)
def test_function_extraction_is_deterministic(name, callee):
    """Any function declaration parses to the same symbols every time."""
    code = f"function {name}(x) {{\n    {callee}(x);\n}}\n"
    js_parser = JavaScriptParser(ParserConfig())

    first = js_parser.parse_string(code, "gen.js")
    second = js_parser.parse_string(code, "gen.js")

    assert first.symbols == second.symbols
    assert first.symbols[0].id == f"gen.js:1:{name}"
    assert [call.target for call in first.symbols[0].calls] == [callee]


@given(
    text=st.text(alphabet=COMMENT_CHARS, max_size=200),
    extra=st.text(alphabet=COMMENT_CHARS, min_size=1, max_size=5),
)
@settings(max_examples=50, deadline=None)
def test_hash_tracks_content(text, extra):
    """Distinct inputs hash differently and the hash is the sha256 of the bytes."""
    js_parser = JavaScriptParser(ParserConfig())

    code = f"// {text}\n"
    first = js_parser.parse_string(code, "gen.js")
    second = js_parser.parse_string(f"// {text}{extra}\n", "gen.js")

    assert first.hash == hashlib.sha256(code.encode("utf-8")).hexdigest()
    assert first.hash != second.hash
