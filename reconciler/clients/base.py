from abc import ABC, abstractmethod

import requests


class BaseClient(ABC):
    @abstractmethod
    def make_session(self) -> requests.Session:
        """Create and configure an HTTP session with auth headers."""

    @abstractmethod
    def send(self, session, payload, product_id=None) -> dict:
        """Create (no ``product_id``) or update a product, returning the stored record."""
