from dataclasses import dataclass
from typing import Dict, List


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: str
    ingredients: List[str]

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "ingredients": list(self.ingredients)}


__all__ = ["Recipe"]
