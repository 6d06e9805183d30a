"""docbridge HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that fronts the document store client.

Usage
-----
Create and run the application::

    from docbridge.api import create_app

    app = create_app()              # banner and health endpoints only
    app = create_app(dependencies)  # full mode with document endpoints

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when a store client is provided, the ``/receive`` and
    ``/api/data`` endpoints.
AppDependencies
    Store client, credential manager and collection for the full app.
"""

from docbridge.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
