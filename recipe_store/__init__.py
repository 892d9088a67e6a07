import os
from typing import Any, Dict, Optional, Sequence

from flask import Flask, abort, jsonify, request
from werkzeug.exceptions import HTTPException

from .models import Recipe
from .storage import InMemoryRecipeStorage, RecipeRepository

DEFAULT_MAX_CONTENT_LENGTH = 1024 * 1024


def create_app(storage: Optional[RecipeRepository] = None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use an
        :class:`InMemoryRecipeStorage` seeded with the startup recipes.
    """

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = int(
        os.environ.get("MAX_CONTENT_LENGTH", DEFAULT_MAX_CONTENT_LENGTH)
    )

    if storage is None:
        storage = InMemoryRecipeStorage.with_defaults()
    app.config["RECIPE_STORAGE"] = storage

    @app.get("/recipes")
    def list_recipes():
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        return jsonify([recipe.to_dict() for recipe in storage_backend.list_recipes()])

    @app.post("/recipes")
    def create_recipe():
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        payload = _json_body(("name", "ingredients"))

        recipe = storage_backend.add_recipe(
            name=payload["name"],
            ingredients=payload["ingredients"],
        )
        return jsonify(recipe.to_dict()), 201

    @app.put("/recipes/<recipe_id>")
    def update_recipe(recipe_id: str):
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        payload = _json_body(("id", "name", "ingredients"))

        if payload["id"] != recipe_id:
            abort(
                400,
                description=(
                    f"Request path id ({recipe_id}) and request body id "
                    f"({payload['id']}) must match"
                ),
            )

        try:
            storage_backend.update_recipe(
                recipe_id,
                name=payload["name"],
                ingredients=payload["ingredients"],
            )
        except KeyError as exc:
            abort(404, description=exc.args[0])

        return "", 204

    @app.delete("/recipes/<recipe_id>")
    def delete_recipe(recipe_id: str):
        storage_backend: RecipeRepository = app.config["RECIPE_STORAGE"]
        try:
            storage_backend.delete_recipe(recipe_id)
        except KeyError as exc:
            abort(404, description=exc.args[0])

        return "", 204

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        app.logger.exception("Unhandled error while serving %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error."}), 500

    return app


def _json_body(required_fields: Sequence[str]) -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description="Request body must be a JSON object.")

    for field_name in required_fields:
        if field_name not in payload:
            abort(400, description=f"Missing `{field_name}` in request body")

    if not isinstance(payload["ingredients"], list):
        abort(400, description="`ingredients` must be a list")

    return payload


__all__ = ["create_app", "Recipe"]
