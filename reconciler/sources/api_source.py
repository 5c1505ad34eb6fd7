import logging

import requests
from django.conf import settings

from .base import BaseSource

logger = logging.getLogger(__name__)

PRODUCT_API_BASE_URL = getattr(settings, 'PRODUCT_API_BASE_URL', 'https://api.marketplace.local/v1')
PRODUCT_API_TOKEN = getattr(settings, 'PRODUCT_API_TOKEN', 'marketplace-admin-token')
PRODUCT_API_TIMEOUT = getattr(settings, 'PRODUCT_API_TIMEOUT', 10.0)
PRODUCT_API_LANGUAGE = getattr(settings, 'PRODUCT_API_LANGUAGE', 'en')

# Relations the editor needs loaded alongside the product.
PRODUCT_RELATIONS = (
    'type;shop;categories;tags;variations.attribute.values;variation_options;'
    'variation_options.digital_file;author;manufacturer;digital_file'
)


class ApiProductSource(BaseSource):
    def __init__(self, language=None):
        self.language = language or PRODUCT_API_LANGUAGE
        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {PRODUCT_API_TOKEN}',
            'Accept': 'application/json',
        })

    def get(self, product_id) -> dict | None:
        url = f"{PRODUCT_API_BASE_URL}/products/{product_id}"
        response = self.session.get(
            url,
            params={'language': self.language, 'with': PRODUCT_RELATIONS},
            timeout=PRODUCT_API_TIMEOUT,
        )
        if response.status_code == 404:
            logger.info("Product %s not found", product_id)
            return None
        response.raise_for_status()

        body = response.json()
        if isinstance(body, dict) and isinstance(body.get('data'), dict):
            return body['data']
        return body
