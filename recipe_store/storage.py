from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from typing import Iterable, List, Protocol, Sequence, Tuple

from .models import Recipe

logger = logging.getLogger(__name__)

DEFAULT_RECIPES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("boiled white rice", ("1 cup white rice", "2 cups water", "pinch of salt")),
    ("milkshake", ("2 tbsp cocoa", "2 cups vanilla ice cream", "1 cup milk")),
)


class RecipeRepository(Protocol):
    """Protocol describing the behaviour required by the web layer."""

    def list_recipes(self) -> Iterable[Recipe]:
        """Return an iterable of stored recipes in insertion order."""

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Return a single recipe or raise :class:`KeyError` if missing."""

    def add_recipe(self, *, name: str, ingredients: Sequence[str]) -> Recipe:
        """Store a new recipe under a fresh id and return it."""

    def update_recipe(self, recipe_id: str, *, name: str, ingredients: Sequence[str]) -> Recipe:
        """Replace the fields of an existing recipe and return the new representation."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Remove a recipe or raise :class:`KeyError` if missing."""


class InMemoryRecipeStorage(RecipeRepository):
    """Recipe storage kept in process memory for the lifetime of the instance.

    Every operation runs under a single lock and callers only ever receive
    copies of the stored records.
    """

    def __init__(self) -> None:
        self._recipes: List[Recipe] = []
        self._lock = threading.Lock()

    @classmethod
    def with_defaults(cls) -> "InMemoryRecipeStorage":
        """Build a storage instance seeded with the startup recipes."""

        storage = cls()
        for name, ingredients in DEFAULT_RECIPES:
            storage.add_recipe(name=name, ingredients=ingredients)
        return storage

    def list_recipes(self) -> List[Recipe]:
        with self._lock:
            return [self._copy(recipe) for recipe in self._recipes]

    def get_recipe(self, recipe_id: str) -> Recipe:
        with self._lock:
            return self._copy(self._find(recipe_id))

    def add_recipe(self, *, name: str, ingredients: Sequence[str]) -> Recipe:
        with self._lock:
            recipe_id = uuid.uuid4().hex
            while any(recipe.id == recipe_id for recipe in self._recipes):
                recipe_id = uuid.uuid4().hex

            recipe = Recipe(id=recipe_id, name=name, ingredients=list(ingredients))
            self._recipes.append(recipe)
            logger.info("Created recipe %s (%s)", recipe.id, recipe.name)
            return self._copy(recipe)

    def update_recipe(self, recipe_id: str, *, name: str, ingredients: Sequence[str]) -> Recipe:
        with self._lock:
            recipe = self._find(recipe_id)
            recipe.name = name
            recipe.ingredients = list(ingredients)
            logger.info("Updated recipe %s", recipe_id)
            return self._copy(recipe)

    def delete_recipe(self, recipe_id: str) -> None:
        with self._lock:
            for index, recipe in enumerate(self._recipes):
                if recipe.id == recipe_id:
                    self._recipes.pop(index)
                    logger.info("Deleted recipe %s", recipe_id)
                    return
        raise KeyError(f"Recipe '{recipe_id}' does not exist.")

    def _find(self, recipe_id: str) -> Recipe:
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        raise KeyError(f"Recipe '{recipe_id}' does not exist.")

    @staticmethod
    def _copy(recipe: Recipe) -> Recipe:
        return replace(recipe, ingredients=list(recipe.ingredients))


__all__ = ["DEFAULT_RECIPES", "InMemoryRecipeStorage", "RecipeRepository"]
