"""
Manual "move up / move down" ordering for categories and products.

A scope is a set of rows that share one ordering: all categories, or the
products of one category. Rows are created without a meaningful sort_order,
so the first move in a scope renumbers it 0..N-1 in
(sort_order nulls last, created_at) order before swapping. Deleting a row
never renumbers the survivors; gaps are fine.

The planning helpers are pure and work on any objects with ``pk``,
``sort_order`` and ``created_at``. ``move_item`` applies them to a queryset
inside one transaction with the scope's rows locked, so both halves of a
swap commit together and concurrent moves on one scope queue up behind each
other (on databases that support row locks).
"""
import logging
from collections import namedtuple

from django.db import transaction
from django.db.models import F, Max

logger = logging.getLogger(__name__)

UP = 'up'
DOWN = 'down'
DIRECTIONS = (UP, DOWN)

MovePlan = namedtuple('MovePlan', ['renumber', 'swap'])
_Row = namedtuple('_Row', ['pk', 'sort_order', 'created_at'])


def scope_sort_key(item):
    return (item.sort_order is None, item.sort_order or 0, item.created_at, item.pk)


def sort_scope(items):
    """Order items the way the database lists a scope"""
    return sorted(items, key=scope_sort_key)


def needs_normalization(sort_orders):
    """A scope is uninitialized when every row shares one value or any row has none.

    A scope where every row was deliberately pinned to the same rank looks
    exactly like a fresh one and is renumbered too.
    """
    values = list(sort_orders)
    return len(set(values)) == 1 or any(value is None for value in values)


def plan_swap(ordered_items, item_id, direction):
    """Return the two (pk, new_sort_order) updates that move ``item_id`` one step.

    ``ordered_items`` must already be normalized and in scope order. Returns
    None when the item is at the boundary for ``direction`` or not in scope.
    """
    ids = [item.pk for item in ordered_items]
    if item_id not in ids:
        return None
    current_index = ids.index(item_id)

    if direction == UP and current_index > 0:
        target_index = current_index - 1
    elif direction == DOWN and current_index < len(ids) - 1:
        target_index = current_index + 1
    else:
        return None

    current = ordered_items[current_index]
    target = ordered_items[target_index]
    return [(current.pk, target.sort_order), (target.pk, current.sort_order)]


def plan_move(items, item_id, direction):
    """Work out a whole move without touching the database.

    Returns a MovePlan whose ``renumber`` maps pk -> index when the scope
    has to be normalized first (empty otherwise) and whose ``swap`` is the
    result of plan_swap on the normalized scope.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction: {direction}")

    ordered = sort_scope(items)
    renumber = {}
    if needs_normalization(item.sort_order for item in ordered):
        renumber = {item.pk: index for index, item in enumerate(ordered)}
        ordered = [
            _Row(item.pk, renumber[item.pk], item.created_at) for item in ordered
        ]
    return MovePlan(renumber=renumber, swap=plan_swap(ordered, item_id, direction))


def ordered_scope(queryset):
    return queryset.order_by(F('sort_order').asc(nulls_last=True), 'created_at', 'pk')


def next_sort_order(queryset, field='sort_order'):
    """Position for a row appended to the end of a scope"""
    highest = queryset.aggregate(highest=Max(field))['highest']
    return 0 if highest is None else highest + 1


def move_item(queryset, item_id, direction):
    """Move one row of a scope up or down and persist the swap.

    ``queryset`` selects the whole scope. Returns True when the swap was
    written and False when there was nothing to do (empty scope, row not in
    scope, or already at the boundary). Database errors propagate after the
    transaction is rolled back.
    """
    model = queryset.model
    label = model._meta.verbose_name

    with transaction.atomic():
        items = list(ordered_scope(queryset.select_for_update()).only('pk', 'sort_order', 'created_at'))
        plan = plan_move(items, item_id, direction)
        if not items:
            logger.warning(f"No {label} rows found in scope")
            return False

        if plan.renumber:
            logger.info(f"Initializing sort_order values for {len(items)} {label} rows")
            for pk, index in plan.renumber.items():
                model.objects.filter(pk=pk).update(sort_order=index)

        if plan.swap is None:
            logger.info(f"Cannot move {label} {item_id} further {direction}")
            return False

        (current_id, current_order), (target_id, target_order) = plan.swap
        logger.info(f"Swapping {label}: {current_id}({target_order}) <-> {target_id}({current_order})")
        model.objects.filter(pk=current_id).update(sort_order=current_order)
        model.objects.filter(pk=target_id).update(sort_order=target_order)

    return True
