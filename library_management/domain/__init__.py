"""Domain layer (pure logic).

- Keep lending, penalty and pricing rules here.
- Avoid I/O: no DB sessions, no HTTP/FastAPI.
- Prefer deterministic functions (today's date is passed in as an argument).
"""
