"""WSGI entrypoint for the recipe store service.

The development server is intentionally not started from this module so that
deployments rely on a WSGI server such as Gunicorn. Local development can use
``flask --app main run``; test harnesses start a background server with
:func:`recipe_store.server.run_server` instead.
"""

from recipe_store import create_app

app = create_app()


__all__ = ["app"]
