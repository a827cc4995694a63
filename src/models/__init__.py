"""Request and response schemas for ollama-emulator.

Modules:
- requests: client request bodies and the upstream request
- responses: client response bodies and the upstream reply
"""

__all__: list[str] = []
