"""Generate TypeScript type definitions from OpenAPI schemas.

Resolves schema sources from CLI arguments, stdin or a redocly.yaml config
and writes the generated types to files or stdout.
"""

__version__ = "1.0.0"
