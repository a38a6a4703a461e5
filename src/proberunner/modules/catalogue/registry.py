"""Read-only technique registry."""

from collections.abc import Iterable
from functools import lru_cache

from proberunner.errors import UnknownCategoryError

from .models import CategoryDescriptor, TechniqueCategory, TestCase
from .techniques import builtin_categories


class Catalogue:
    """Registry of technique categories, keyed by id and kept in insertion order."""

    def __init__(self, categories: Iterable[TechniqueCategory]):
        self._categories: dict[str, TechniqueCategory] = {}
        for category in categories:
            if category.id in self._categories:
                raise ValueError(f"Duplicate category id: {category.id}")
            for test in category.tests:
                if test.category != category.id:
                    raise ValueError(
                        f"Test case {test.description!r} belongs to {test.category!r}, "
                        f"not {category.id!r}"
                    )
            self._categories[category.id] = category

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def has(self, category_id: str) -> bool:
        return category_id in self._categories

    def ids(self) -> list[str]:
        return list(self._categories)

    def get(self, category_id: str) -> TechniqueCategory:
        try:
            return self._categories[category_id]
        except KeyError:
            raise UnknownCategoryError(category_id) from None

    def list_categories(self) -> list[CategoryDescriptor]:
        """Return descriptors for every category in registration order."""
        return [
            CategoryDescriptor(
                id=category.id,
                name=category.name,
                description=category.description,
                count=len(category.tests),
            )
            for category in self._categories.values()
        ]

    def tests_for(self, category_id: str) -> tuple[TestCase, ...]:
        """Return the ordered test cases of a category."""
        return self.get(category_id).tests

    def count_for(self, category_id: str) -> int:
        """Return how many test cases a category holds."""
        return len(self.get(category_id).tests)

    def total_for(self, category_ids: Iterable[str]) -> int:
        return sum(self.count_for(category_id) for category_id in category_ids)


@lru_cache(maxsize=1)
def default_catalogue() -> Catalogue:
    """Return the shared catalogue of built-in techniques."""
    return Catalogue(builtin_categories())
