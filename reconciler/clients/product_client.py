import logging

import requests
from django.conf import settings

from .base import BaseClient

logger = logging.getLogger(__name__)

PRODUCT_API_BASE_URL = getattr(settings, 'PRODUCT_API_BASE_URL', 'https://api.marketplace.local/v1')
PRODUCT_API_TOKEN = getattr(settings, 'PRODUCT_API_TOKEN', 'marketplace-admin-token')
PRODUCT_API_TIMEOUT = getattr(settings, 'PRODUCT_API_TIMEOUT', 10.0)

# Relation-only keys the products table has no column for on update.
UPDATE_OMIT_KEYS = ('variations',)


def normalize_product_response(body, fallback):
    """The backend answers with ``{data: product}`` or the bare product."""
    if isinstance(body, dict) and isinstance(body.get('data'), dict):
        return {**fallback, **body['data']}
    if isinstance(body, dict):
        return {**fallback, **body}
    return dict(fallback)


class ProductApiClient(BaseClient):
    def make_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'Authorization': f'Bearer {PRODUCT_API_TOKEN}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        return session

    def send(self, session, payload, product_id=None) -> dict:
        if product_id is not None:
            url = f"{PRODUCT_API_BASE_URL}/products/{product_id}"
            body = {k: v for k, v in payload.items() if k not in UPDATE_OMIT_KEYS}
            response = session.put(url, json=body, timeout=PRODUCT_API_TIMEOUT)
            fallback = {'id': product_id, 'slug': payload.get('slug')}
        else:
            url = f"{PRODUCT_API_BASE_URL}/products"
            response = session.post(url, json=payload, timeout=PRODUCT_API_TIMEOUT)
            fallback = {'slug': payload.get('slug')}

        if not response.ok:
            logger.error(
                "Product write failed (%s %s): %s",
                response.request.method, url, response.status_code,
            )
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError:
            body = None
        return normalize_product_response(body, fallback)
