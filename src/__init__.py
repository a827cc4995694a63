"""ollama-emulator: Ollama-compatible API emulator.

Serves synthesized responses for the Ollama /api/* surface and forwards
/v1/completions to an external completion service.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
