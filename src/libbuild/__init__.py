"""
libbuild - Build-task orchestrator for small JavaScript libraries

Runs a library's build steps as named tasks:
- UMD wrapping, linting, minification and comment raising
- Tests against the built, minified file
- Example linting and catalog generation
- Watch mode that re-runs tasks when sources change
"""

__version__ = "0.1.0"
__package_name__ = "libbuild"
