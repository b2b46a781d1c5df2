"""Discovery-driven code generation tooling: naming, URI templates, rustfmt output and template substitution."""

__version__ = "0.1.0"