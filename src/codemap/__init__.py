"""codemap: code-ontology engine over extracted per-file facts."""

__version__ = "0.3.0"
