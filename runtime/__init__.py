"""
Runtime package for the Polaris route server.

This package contains:
- API layer (FastAPI server + routes)
- Agents (per-turn route orchestration)
- Stores (chat sessions)
- Map (renderer contract + route synchronizer)
- Models (Pydantic models for requests and sessions)
"""
