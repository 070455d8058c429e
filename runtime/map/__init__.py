"""
Map-side components of the Polaris runtime.

Includes:
- renderer: the MapRenderer contract and an in-memory GeoJSON renderer
- route_synchronizer: the single owner of renderer state
- navigation: Google Maps turn-by-turn URL export
"""
