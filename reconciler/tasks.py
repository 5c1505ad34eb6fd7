import logging

import requests
from celery import shared_task
from django.conf import settings
from django.utils.module_loading import import_string

from reconciler.editor import ProductEditor

logger = logging.getLogger(__name__)


def build_editor():
    source = import_string(settings.PRODUCT_SOURCE_CLASS)()
    client = import_string(settings.PRODUCT_CLIENT_CLASS)()
    return ProductEditor(source=source, client=client)


def _is_transient(exc):
    if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True
    response = getattr(exc, 'response', None)
    return response is not None and response.status_code >= 500


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def save_product_form(self, form_values, product_id=None, is_new_translation=False):
    editor = build_editor()
    try:
        result = editor.save(form_values, product_id=product_id, is_new_translation=is_new_translation)
    except requests.exceptions.RequestException as exc:
        logger.error("Failed to save product %s: %s", product_id, exc)
        if _is_transient(exc):
            raise self.retry(exc=exc)
        raise
    return {'status': result['status'], 'product_id': result['product'].get('id', product_id)}
