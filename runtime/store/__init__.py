"""
Storage abstractions for the Polaris runtime.

Includes:
- SessionStore: in-memory chat sessions keyed by id, with one active session
"""
