"""
Services Layer

Pure business logic services that:
- Accept domain inputs (user ids, payloads, stores)
- Return domain outputs (models, dicts, etc.)
- Do NOT depend on HTTP request/response objects
- Raise wc26.errors exceptions; routes decide the HTTP status
"""
