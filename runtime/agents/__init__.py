"""
Agents used by the Polaris runtime.

RouteAgent handles one user turn:

- receives a session id + new user message
- requests a route and transforms the response
- attaches the result to the session and updates the map
"""
