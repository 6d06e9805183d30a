"""Health probe resources for liveness and readiness checks.

Usage
-----
Import health resources for route registration::

    from docbridge.api.health.resources import HealthResource, ReadyResource
"""
