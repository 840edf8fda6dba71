"""Symbol and call-graph extraction for JavaScript source files."""
