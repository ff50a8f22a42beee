"""CodeFlow CLI: whole-project Mermaid flowcharts from a source tree."""

__version__ = "0.3.0"
