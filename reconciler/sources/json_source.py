import json
from pathlib import Path

from django.conf import settings

from reconciler.transforms import unwrap_list

from .base import BaseSource


class JsonFileSource(BaseSource):
    def __init__(self, path=None):
        self.path = Path(path) if path else Path(settings.PRODUCT_DATA_FILE)

    def load(self) -> list[dict]:
        with open(self.path, 'r', encoding='utf-8') as f:
            return unwrap_list(json.load(f))

    def get(self, product_id) -> dict | None:
        key = str(product_id)
        for product in self.load():
            if str(product.get('id')) == key or product.get('slug') == key:
                return product
        return None
