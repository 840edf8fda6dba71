"""Extraction limits and grammar-level constants.

These values bound the work done per file and per symbol. The parser reads
the tunable ones through ``jsextract.config`` so they can be overridden from
an INI file; the rest are fixed properties of the JavaScript conventions the
extractor recognizes.
"""

# =============================================================================
# Input Limits
# =============================================================================
# Files larger than this are rejected before tree construction. Bundled or
# minified output routinely exceeds it and carries no useful structure.

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

JAVASCRIPT_EXTENSIONS = (".js", ".mjs", ".cjs", ".jsx")

# =============================================================================
# Call-Site Walker Bounds
# =============================================================================
# The walker stops collecting once a single body has produced this many call
# sites. This is a hard cap, not a sample: the first N in traversal order win.

MAX_CALL_SITES_PER_SYMBOL = 1000

# Nodes deeper than this below the body root are pruned. Sibling branches are
# still visited.

MAX_CALL_EXPRESSION_DEPTH = 50

# Cancellation is polled once per this many visited nodes.

CANCEL_CHECK_INTERVAL = 100

# Member-expression arguments longer than this are not treated as callbacks.

MAX_CALLBACK_ARG_LENGTH = 50

# Callee text used as a call target for unusual callee shapes is truncated.

MAX_CALL_TARGET_LENGTH = 100

# Identifiers that are never callback references when passed as arguments.

NON_CALLBACK_IDENTIFIERS = frozenset(
    {
        "true",
        "false",
        "null",
        "undefined",
        "this",
        "console",
        "window",
        "document",
    }
)

# =============================================================================
# Heuristics
# =============================================================================
# Constructor-function detection looks for `this.x = ...` only this many
# statement levels below the function body.

MAX_THIS_ASSIGNMENT_DEPTH = 10

# Only block comments opening with this marker are attached as doc comments.

DOC_COMMENT_PREFIX = "/**"
