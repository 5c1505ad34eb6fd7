"""
Category assignment normalization.

The backend has returned product categories in several shapes over time
(pivot-embedded relations, ``{data: [...]}`` envelopes, a single object,
bare id lists). Everything is reduced to rows of::

    {'categories_id': int, 'sous_categories_id': [int], 'sub_categories_id': [int]}

Normalization is best-effort: malformed ids are dropped and an unknown shape
yields an empty list. Nothing here raises.
"""

from enum import Enum

from reconciler.transforms import to_int

CATEGORY_KEYS = ('categories', 'product_categories', 'categories_list')
SINGLE_CATEGORY_KEYS = ('category', 'product_category')
ID_LIST_KEYS = ('category_ids', 'category_ids_list')
SINGLE_ID_KEYS = ('categories_id', 'category_id')

SOUS_ID_KEYS = ('sous_categories_id', 'sous_category_ids', 'sous_category_id')
SUB_ID_KEYS = ('sub_categories_id', 'sub_category_ids', 'sub_category_id')


class CategoryShape(Enum):
    LIST = 'list'
    ENVELOPE = 'envelope'
    SINGLE = 'single'
    ID_LIST = 'id_list'
    SINGLE_ID = 'single_id'
    ABSENT = 'absent'


def _first_present(mapping, keys):
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def parse_ids(value, alt_key=None):
    """Ids from a list (of ids or objects), a CSV string, or a single id."""
    if value is None or value == '':
        return []
    if isinstance(value, str):
        tokens = value.split(',')
    elif isinstance(value, (list, tuple)):
        tokens = value
    else:
        tokens = [value]

    ids = []
    for token in tokens:
        if isinstance(token, dict):
            token = token.get('id') if token.get('id') is not None else token.get(alt_key)
        number = to_int(token)
        if number is not None and number > 0:
            ids.append(number)
    return ids


def classify_categories(product):
    """Returns ``(shape, payload)`` for the category assignment carried by ``product``."""
    if not isinstance(product, dict):
        return CategoryShape.ABSENT, None

    raw = _first_present(product, CATEGORY_KEYS)
    if isinstance(raw, list) and raw:
        return CategoryShape.LIST, raw
    if isinstance(raw, dict):
        if isinstance(raw.get('data'), list):
            if raw['data']:
                return CategoryShape.ENVELOPE, raw['data']
        else:
            return CategoryShape.SINGLE, raw

    single = _first_present(product, SINGLE_CATEGORY_KEYS)
    if isinstance(single, list) and single:
        return CategoryShape.LIST, single
    if isinstance(single, dict):
        return CategoryShape.SINGLE, single

    ids = parse_ids(_first_present(product, ID_LIST_KEYS))
    if ids:
        return CategoryShape.ID_LIST, ids

    single_id = to_int(_first_present(product, SINGLE_ID_KEYS))
    if single_id is not None:
        return CategoryShape.SINGLE_ID, single_id

    return CategoryShape.ABSENT, None


def _sub_ids(element, pivot, id_keys, relation_key, alt_key):
    value = _first_present(pivot, id_keys)
    if value is None:
        value = _first_present(element, id_keys)
    explicit = parse_ids(value)
    if explicit:
        return explicit
    from_element = parse_ids(element.get(relation_key) or [], alt_key)
    if from_element:
        return from_element
    return parse_ids(pivot.get(relation_key) or [], alt_key)


def _row_from_element(element):
    if not isinstance(element, dict):
        return None
    pivot = element.get('pivot')
    if not isinstance(pivot, dict):
        pivot = element

    categories_id = pivot.get('categories_id')
    if categories_id is None:
        categories_id = _first_present(element, ('categories_id', 'id'))
    return {
        'categories_id': to_int(categories_id),
        'sous_categories_id': _sub_ids(element, pivot, SOUS_ID_KEYS, 'sous_categories', 'sous_category_id'),
        'sub_categories_id': _sub_ids(element, pivot, SUB_ID_KEYS, 'sub_categories', 'sub_category_id'),
    }


def _rows_from_ids(ids):
    return [{'categories_id': i, 'sous_categories_id': [], 'sub_categories_id': []} for i in ids]


def _merge_product_level_ids(product, rows):
    # Older single-category payloads carry sub-category ids on the product itself.
    if not rows:
        return rows
    first = rows[0]
    product_sous = parse_ids(_first_present(product, SOUS_ID_KEYS))
    product_sub = parse_ids(_first_present(product, SUB_ID_KEYS))
    if not first['sous_categories_id'] and product_sous:
        first['sous_categories_id'] = product_sous
    if not first['sub_categories_id'] and product_sub:
        first['sub_categories_id'] = product_sub
    return rows


def normalize_categories(product):
    shape, payload = classify_categories(product)

    if shape in (CategoryShape.LIST, CategoryShape.ENVELOPE):
        rows = [_row_from_element(element) for element in payload]
    elif shape is CategoryShape.SINGLE:
        rows = [_row_from_element(payload)]
    elif shape is CategoryShape.ID_LIST:
        rows = _rows_from_ids(payload)
    elif shape is CategoryShape.SINGLE_ID:
        rows = _rows_from_ids([payload])
    else:
        return []

    rows = [
        row for row in rows
        if row is not None and row['categories_id'] is not None and row['categories_id'] > 0
    ]
    return _merge_product_level_ids(product, rows)
