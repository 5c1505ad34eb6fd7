def _prices(options, field):
    return [option.get(field) for option in options if option.get(field) is not None]


def calculate_min_max_price(options):
    """
    Price range shown for a variable product.

    ``max_price`` is the highest regular price. ``min_price`` is the lowest
    regular price unless the lowest sale price undercuts it.
    """
    if not options:
        return {'min_price': None, 'max_price': None}

    prices = _prices(options, 'price')
    sale_prices = _prices(options, 'sale_price')
    lowest_price = min(prices) if prices else None
    lowest_sale = min(sale_prices) if sale_prices else None

    if lowest_sale is not None and (lowest_price is None or lowest_sale < lowest_price):
        min_price = lowest_sale
    else:
        min_price = lowest_price

    return {
        'min_price': min_price,
        'max_price': max(prices) if prices else None,
    }


def calculate_quantity(options):
    return sum(option.get('quantity') or 0 for option in options or [])


def aggregate(options):
    options = options or []
    return {**calculate_min_max_price(options), 'quantity': calculate_quantity(options)}
