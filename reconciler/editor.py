import logging

from reconciler.mapper import form_values_to_api_input, product_to_form_values
from reconciler.models import ProductSnapshot
from reconciler.transforms import compute_hash, unwrap_list

logger = logging.getLogger(__name__)


def refresh_snapshot_data(previous, stored, payload):
    """
    Server state after a successful write.

    The write endpoint may answer with little more than ``{id, slug}``, so the
    response is merged over the previous snapshot. Without ``variation_options``
    in the response, the previous options minus the ones just deleted are kept.
    """
    data = {**(previous or {}), **stored}
    if 'variation_options' not in stored:
        deleted = {str(option_id) for option_id in payload['variation_options']['delete']}
        data['variation_options'] = [
            option for option in unwrap_list((previous or {}).get('variation_options'))
            if str(option.get('id')) not in deleted
        ]
    return data


class ProductEditor:
    """
    One product edit session: load a product into form values, then save the
    edited form against the snapshot captured at load time.

    The snapshot is the only record of what the server held, so variation
    options changed by someone else in between are not seen by the delete diff.
    """

    def __init__(self, source, client):
        self.source = source
        self.client = client

    def load(self, product_id=None, is_new_translation=False):
        if product_id is None:
            return product_to_form_values(None)

        product = self.source.get(product_id)
        if product is None:
            logger.warning("Product %s not found, opening an empty form", product_id)
            return product_to_form_values(None)

        snapshot_id = str(product.get('id') or product_id)
        ProductSnapshot.objects.update_or_create(
            product_id=snapshot_id,
            defaults={'data': product, 'data_hash': compute_hash(product), 'form_hash': ''},
        )
        logger.info("Loaded product %s for editing", snapshot_id)
        return product_to_form_values(product, is_new_translation)

    def _find_snapshot(self, product_id):
        key = str(product_id)
        snapshot = ProductSnapshot.objects.filter(pk=key).first()
        if snapshot is None:
            # Products loaded by slug are stored under their resolved id.
            snapshot = ProductSnapshot.objects.filter(data__slug=key).first()
        return snapshot

    def save(self, form_values, product_id=None, is_new_translation=False):
        snapshot = None
        if product_id is not None:
            snapshot = self._find_snapshot(product_id)
            if snapshot is None:
                logger.warning("No snapshot for product %s, no variation options will be deleted", product_id)
            else:
                product_id = snapshot.product_id

        form_hash = compute_hash(form_values)
        original = snapshot.data if snapshot else None
        payload = form_values_to_api_input(form_values, original, is_new_translation)

        if snapshot and snapshot.form_hash == form_hash:
            logger.debug("Product %s already saved with this form, skipping", product_id)
            return {'status': 'unchanged', 'product': snapshot.data, 'payload': payload}

        session = self.client.make_session()
        stored = self.client.send(session, payload, product_id=product_id)
        status = 'updated' if product_id is not None else 'created'

        stored_id = stored.get('id') or product_id
        if stored_id is not None:
            data = refresh_snapshot_data(original, stored, payload)
            ProductSnapshot.objects.update_or_create(
                product_id=str(stored_id),
                defaults={'data': data, 'data_hash': compute_hash(data), 'form_hash': form_hash},
            )

        logger.info(
            "Saved product %s (%s): %d variation options upserted, %d deleted",
            stored_id, status,
            len(payload['variation_options']['upsert']),
            len(payload['variation_options']['delete']),
        )
        return {'status': status, 'product': stored, 'payload': payload}
