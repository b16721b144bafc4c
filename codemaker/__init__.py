"""
CodeMaker: command-line client for the CodeMaker AI code generation service.

Generates, edits and documents source files and whole source trees, resolving
cross-file context so the service sees the code a file depends on.
"""

__version__ = "0.1.0"
