"""Services for ollama-emulator.

Services:
- upstream_client: httpx client for the upstream completion service
- translation: /v1/completions request/response translation
"""

__all__: list[str] = []
