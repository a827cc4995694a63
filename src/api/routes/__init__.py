"""API route handlers for ollama-emulator.

Routes:
- ollama: synthesized /api/* handlers
- completions: /v1/completions (forwarded upstream)
- health: /health, /health/ready
"""

__all__: list[str] = []
