"""
Ingredient Row Service

Parse-with-defaults for ingredient rows and the cost arithmetic
derived from them.
"""

from decimal import Decimal, ROUND_HALF_UP

from .numeric import to_number


def blank_row():
    """Return a new empty ingredient row."""
    return {'name': '', 'cost': 0.0, 'amount': 0.0, 'recipeAmount': 0.0}


def parse_row(raw):
    """
    Normalize a row-shaped mapping.

    Missing or None name becomes ''. Numeric fields go through
    to_number, so malformed values become 0.
    """
    name = raw.get('name')
    return {
        'name': '' if name is None else str(name),
        'cost': to_number(raw.get('cost')),
        'amount': to_number(raw.get('amount')),
        'recipeAmount': to_number(raw.get('recipeAmount')),
    }


def parse_rows(raw):
    """
    Normalize a stored row sequence.

    Returns None when raw is not a list of mappings, so callers can fall
    back to another source.
    """
    if not isinstance(raw, list):
        return None
    rows = []
    for item in raw:
        if not isinstance(item, dict):
            return None
        rows.append(parse_row(item))
    return rows


def unit_cost(row):
    """Cost of one purchased unit; 0 when nothing was purchased."""
    amount = row['amount']
    return row['cost'] / amount if amount > 0 else 0.0


def line_cost(row):
    """Cost of the amount this recipe actually uses."""
    return unit_cost(row) * row['recipeAmount']


def compute_row(row):
    return {
        **row,
        'unitCost': unit_cost(row),
        'lineCost': line_cost(row),
    }


def total_cost(rows):
    """Sum of line costs across all rows."""
    return sum(line_cost(row) for row in rows)


def final_price(total, margin_pct):
    """
    Suggested sale price: total marked up by margin_pct, rounded half up
    to a whole number.
    """
    price = Decimal(str(to_number(total))) * (1 + Decimal(str(to_number(margin_pct))) / 100)
    return int(price.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
