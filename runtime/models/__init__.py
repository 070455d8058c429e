"""
Pydantic models used by the Polaris runtime.

Split into:
- session_models: Session
- api_models: HTTP request/response schemas

Route data shapes (DirectionsResponse, WaypointDetail, ...) live in
core/directions/models.py.
"""
