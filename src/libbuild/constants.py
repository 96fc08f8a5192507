"""
Centralized constants for libbuild.

Default file patterns, directories and tool commands live here so the
config loader and the workflow factory agree on them.
"""

# Patterns for reading files
DEFAULT_PATTERNS = {
    "src": "src/*.src.js",
    "test": "test/*.js",
    "debug": "dist/*.debug.js",
    "min": "dist/*.min.js",
    "examples": "examples/*.js",
}

# Directories for writing files
DEFAULT_DIRS = {
    "dist": "dist",
    "examples_dir": "examples",
}

# Enqueued build steps, in build order
BUILD_TASKS = ("umd", "lint", "min", "comments", "test")

# Steps of the "examples" composite, in order
EXAMPLE_TASKS = ("examples-lint", "examples-catalog")

TASK_DESCRIPTIONS = {
    "umd": "Wrap src files in a Universal Module Definition",
    "lint": "Lint the debug build",
    "min": "Minify the debug build",
    "comments": "Move the license comment to the top of the minified file",
    "test": "Run the test suite against the built files",
    "build": "Run every enqueued task in registration order",
    "examples-lint": "Lint the example scripts",
    "examples-catalog": "Generate the examples catalog",
    "examples": "Lint the examples, then generate the catalog",
    "watch": "Re-run tasks when sources, tests or examples change",
    "default": "Alias for build",
}

# Default external commands; placeholders are filled from the config
DEFAULT_COMMANDS = {
    "umd": "npm run --silent umd",
    "lint": "npx jshint {debug}",
    "min": "npm run --silent min",
    "comments": "npm run --silent comments",
    "test": "npx mocha {test}",
    "examples-lint": "npx jshint {examples}",
}

# Examples catalog, written into the examples directory
CATALOG_LIST_FILENAME = "_list.jsonp"
CATALOG_INDEX_FILENAME = "_index.html"
CATALOG_HEADER = "// This file is auto-generated. Do not edit.\n"

# Seconds before an external tool is killed
DEFAULT_TIMEOUT = 600.0

# Exit status reported for a timed-out tool (matches coreutils `timeout`)
TIMEOUT_RETURNCODE = 124

CONFIG_FILENAME = "libbuild.yaml"
