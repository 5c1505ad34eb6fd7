from abc import ABC, abstractmethod


class BaseSource(ABC):
    @abstractmethod
    def get(self, product_id) -> dict | None:
        """Fetch one product record by id or slug, or None when it does not exist."""
