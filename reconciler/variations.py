import itertools
import json
import logging

logger = logging.getLogger(__name__)


def group_variations(values):
    """Group flat attribute values by ``attribute.slug``, keeping first-occurrence order."""
    groups = {}
    for item in values or []:
        attribute = item.get('attribute') or {}
        slug = attribute.get('slug')
        group = groups.get(slug)
        if group is None:
            group = {'attribute': attribute, 'values': []}
            groups[slug] = group
        elif attribute != group['attribute']:
            logger.warning(
                "Attribute %r differs between values sharing slug %r, keeping the first one",
                attribute.get('id'), slug,
            )
        group['values'].append({'id': item.get('id'), 'value': item.get('value')})
    return list(groups.values())


def cartesian_product(groups):
    """
    Every combination of one value per group, first group varying slowest.

    Returns an empty list when there are no groups or any group has no values,
    so an unfinished attribute selection never yields a phantom variant.
    """
    axes = []
    for group in groups or []:
        name = (group.get('attribute') or {}).get('name')
        axis = [
            {'name': name, 'value': value.get('value'), 'id': value.get('id')}
            for value in group.get('values') or []
        ]
        if not axis:
            return []
        axes.append(axis)

    if not axes:
        return []
    return [list(combination) for combination in itertools.product(*axes)]


def filter_attributes(attributes, variations):
    """Catalog attributes not yet used by any variation group."""
    used = {(group.get('attribute') or {}).get('slug') for group in variations or []}
    return [attribute for attribute in attributes or [] if attribute.get('slug') not in used]


def process_options(options):
    """Decode a JSON-encoded ``options`` list; anything unparsable is returned unchanged."""
    if not isinstance(options, str):
        return options
    try:
        return json.loads(options)
    except ValueError:
        return options
