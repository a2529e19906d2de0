"""FastAPI Issue Tracker Application.

Records problem reports and attaches a generated description to each one:
- Local heuristic summaries that need no network
- Optional OpenAI summaries using a session-scoped API key
- Graceful fallback to the local summary when the remote call fails
- Issues persisted as one JSON document in a SQLAlchemy key-value table
"""
