"""
Conversion between persisted product records and the product editor form.

``product_to_form_values`` prepares a product for editing and
``form_values_to_api_input`` turns the edited form back into a create/update
payload whose ``variation_options`` carry an ``upsert`` list and a ``delete``
list of ids relative to the snapshot taken when the form was loaded.
"""

import copy
from enum import Enum

from reconciler.categories import normalize_categories
from reconciler.pricing import calculate_min_max_price, calculate_quantity
from reconciler.transforms import is_empty, omit_typename, require_list, unwrap_list
from reconciler.variations import group_variations, process_options


class ProductType(str, Enum):
    SIMPLE = 'simple'
    VARIABLE = 'variable'


PRODUCT_TYPE_OPTIONS = [
    {'name': member.name.capitalize(), 'value': member.value} for member in ProductType
]

# Relations a translated copy must not inherit from its source product.
TRANSLATION_RESET = {
    'type': None,
    'categories': [],
    'author_id': None,
    'manufacturer_id': None,
    'tags': [],
    'author': [],
    'manufacturer': [],
    'variations': [],
    'variation_options': [],
    'digital_file': '',
    'digital_file_input': {},
}

# Form-only keys dropped from each variation option before it is sent.
VARIATION_OPTION_INTERNAL_KEYS = ('__typename', 'digital_files', 'digital_file_input')


def default_form_values():
    return {
        'product_type': dict(PRODUCT_TYPE_OPTIONS[0]),
        'min_price': 0.0,
        'max_price': 0.0,
        'categories': [],
        'tags': [],
        'type': None,
        'in_stock': True,
        'is_taxable': False,
        'image': [],
        'gallery': [],
        'video': [],
        'variations': [],
        'variation_options': [],
    }


def find_product_type_option(value):
    for option in PRODUCT_TYPE_OPTIONS:
        if option['value'] == value:
            return dict(option)
    return None


def _type_selection(product):
    product_type = product.get('type')
    if product_type:
        type_id = product_type.get('id')
        if type_id is None:
            type_id = product.get('type_id')
        return {'id': str(type_id), 'name': product_type.get('name') or ''}
    if product.get('type_id'):
        return {'id': str(product['type_id']), 'name': ''}
    return None


def _variation_option_to_form(option):
    form_option = {k: v for k, v in option.items() if k not in ('image', '__typename')}
    image = option.get('image')
    if not is_empty(image):
        form_option['image'] = omit_typename(image)
    digital_file = option.get('digital_file')
    if digital_file:
        form_option['digital_file_input'] = {
            'id': digital_file.get('attachment_id'),
            'file_name': digital_file.get('file_name'),
        }
    return form_option


def product_to_form_values(product, is_new_translation=False):
    if not product:
        return default_form_values()

    values = copy.deepcopy(product)
    product_type = product.get('product_type')

    values['type'] = _type_selection(product)
    values['product_type'] = find_product_type_option(product_type)

    if product_type == ProductType.SIMPLE and product.get('is_digital'):
        digital_file = product.get('digital_file') or {}
        values['digital_file_input'] = {
            'id': digital_file.get('attachment_id'),
            'thumbnail': digital_file.get('url'),
            'original': digital_file.get('url'),
        }

    if product_type == ProductType.VARIABLE:
        values['variations'] = group_variations(copy.deepcopy(product.get('variations')))
        values['variation_options'] = [
            _variation_option_to_form(option)
            for option in copy.deepcopy(unwrap_list(product.get('variation_options')))
        ]

    values['categories'] = normalize_categories(product)
    values['tags'] = [{'id': tag.get('id'), 'name': tag.get('name')} for tag in product.get('tags') or []]

    if is_new_translation:
        values.update(copy.deepcopy(TRANSLATION_RESET))
        if product_type == ProductType.VARIABLE:
            values['quantity'] = None

    return values


def _snapshot_option_ids(initial_values):
    options = unwrap_list((initial_values or {}).get('variation_options'))
    return [option.get('id') for option in options if option.get('id') is not None]


def _option_pairs(options):
    parsed = process_options(options if options is not None else [])
    if not isinstance(parsed, list) or not all(isinstance(pair, dict) for pair in parsed):
        # Left for server-side validation to reject.
        return parsed
    return [{'name': pair.get('name'), 'value': pair.get('value')} for pair in parsed]


def _variation_option_to_input(option):
    rest = {k: v for k, v in option.items()
            if k not in ('id', 'options', 'image') + VARIATION_OPTION_INTERNAL_KEYS}
    entry = {}
    if option.get('id') not in (None, ''):
        entry['id'] = option['id']
    entry.update(rest)

    image = option.get('image')
    if not is_empty(image):
        entry['image'] = omit_typename(image)

    if rest.get('is_digital'):
        digital_files = option.get('digital_files') or {}
        digital_file_input = option.get('digital_file_input') or {}
        entry['digital_file'] = {
            'id': digital_files.get('id'),
            'attachment_id': digital_file_input.get('id'),
            'url': digital_file_input.get('original'),
            'file_name': digital_file_input.get('file_name'),
        }

    entry['options'] = _option_pairs(option.get('options'))
    return entry


def variation_options_to_delete(initial_values, variation_options):
    """Snapshot option ids that no longer appear among the edited options."""
    edited = {str(option['id']): option for option in variation_options if option.get('id') not in (None, '')}
    return [option_id for option_id in _snapshot_option_ids(initial_values) if str(option_id) not in edited]


def form_values_to_api_input(values, initial_values=None, is_new_translation=False):
    values = dict(values)
    initial_values = initial_values or {}

    product_type = values.pop('product_type', None) or {}
    type_selection = values.pop('type', None)
    quantity = values.pop('quantity', None)
    image = values.pop('image', None)
    values.pop('is_digital', None)
    categories = require_list(values.pop('categories', None), 'categories')
    tags = require_list(values.pop('tags', None), 'tags')
    digital_file_input = values.pop('digital_file_input', None) or {}
    variation_options = require_list(values.pop('variation_options', None), 'variation_options')
    variations = require_list(values.pop('variations', None), 'variations')
    in_flash_sale = values.pop('in_flash_sale', None)

    digital_file = {
        'attachment_id': digital_file_input.get('id'),
        'url': digital_file_input.get('original'),
        'file_name': digital_file_input.get('file_name'),
    }
    if not is_new_translation:
        digital_file['id'] = (initial_values.get('digital_file') or {}).get('id')

    payload = {
        **values,
        'is_digital': True,
        'in_flash_sale': in_flash_sale,
        'type_id': type_selection.get('id') if type_selection else None,
        # Always "simple" on the top-level field; the variant branch below keys off the form option.
        'product_type': ProductType.SIMPLE.value,
        'categories': [
            str(category_id)
            for category_id in (row.get('categories_id') or row.get('id') for row in categories)
            if category_id
        ],
        'tags': [tag.get('id') for tag in tags],
        'image': omit_typename(image),
        'gallery': [omit_typename(item) for item in require_list(values.get('gallery'), 'gallery')],
        'quantity': quantity,
        'digital_file': digital_file,
        'variations': [],
        'variation_options': {
            'upsert': [],
            'delete': _snapshot_option_ids(initial_values),
        },
    }

    if product_type.get('value') == ProductType.VARIABLE:
        payload['quantity'] = calculate_quantity(variation_options)
        payload['variations'] = [
            {'attribute_value_id': value.get('id')}
            for group in variations
            for value in require_list(group.get('values'), 'variations.values')
        ]
        payload['variation_options'] = {
            'upsert': [_variation_option_to_input(option) for option in variation_options],
            'delete': variation_options_to_delete(initial_values, variation_options),
        }

    payload.update(calculate_min_max_price(variation_options))
    return payload
