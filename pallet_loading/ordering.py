"""Orderings over pallets used by the bound, the greedy pass and the search.

Both orderings are total: ties are broken by ascending pallet id, so the
result does not depend on the order of the input list.
"""


def ratio_key(pallet):
    return (-pallet.ratio, pallet.id)


def profit_key(pallet):
    return (-pallet.profit, pallet.id)


def sort_by_ratio(pallets):
    """Return a new list sorted by descending profit/weight ratio."""
    return sorted(pallets, key=ratio_key)


def sort_by_profit(pallets):
    """Return a new list sorted by descending profit."""
    return sorted(pallets, key=profit_key)


def is_ratio_sorted(pallets, start=0):
    """Check that pallets[start:] is in non-increasing ratio order.

    Ties in ratio are accepted in any id order, since the bound only
    depends on the ratios.
    """
    for i in range(start + 1, len(pallets)):
        if pallets[i - 1].ratio < pallets[i].ratio:
            return False
    return True
