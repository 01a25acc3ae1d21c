import logging

import coordinates
from cell_values import ERROR_DISPLAY, ErrorValue, format_value, is_error
from errors import CircularReference, EvaluationError, UnresolvedName

logger = logging.getLogger(__name__)


def _cached(cache, coordinate):
    result = cache[coordinate]
    if isinstance(result, EvaluationError):
        raise result.with_traceback(None)
    return result


def _make_resolver(sheet, active, cache):
    def resolve(name):
        coordinate = coordinates.parse(name)
        if coordinate is None:
            raise UnresolvedName(name)
        if coordinate in cache:
            return _cached(cache, coordinate)
        if coordinate in active:
            raise CircularReference(coordinates.name(coordinate))
        cell = sheet.get(coordinate)
        if cell is None:
            raise UnresolvedName(name)
        return evaluate_value(sheet, cell, active, cache)

    return resolve


def _prime(sheet, root, cache):
    """Evaluate the formulas ``root`` depends on, deepest first, into ``cache``.

    Walks the reference graph with an explicit stack so that long chains of
    references do not nest one Python call per cell. Cells already on the
    walk are skipped; evaluating them later reports the cycle.
    """
    visiting = {root.coordinate}
    stack = [(root, iter(sheet.evaluator.references(root.value[1:])))]
    while stack:
        cell, pending = stack[-1]
        for coordinate in pending:
            if coordinate in cache or coordinate in visiting:
                continue
            dependency = sheet.get(coordinate)
            if dependency is None or not dependency.is_formula:
                continue
            visiting.add(coordinate)
            stack.append((dependency, iter(sheet.evaluator.references(dependency.value[1:]))))
            break
        else:
            stack.pop()
            if cell is not root:
                try:
                    evaluate_value(sheet, cell, set(), cache)
                except EvaluationError as exc:
                    logger.debug("%s: %s", cell.coordinate, exc)


def evaluate_value(sheet, cell, active=None, cache=None):
    """Evaluate ``cell``, raising EvaluationError on failure.

    ``active`` holds the coordinates whose formulas are being evaluated
    further up the call chain; meeting one of them again is a cycle.
    ``cache`` maps coordinates to results (values or errors) already known
    during this evaluation and may be shared across calls while the sheet
    is unchanged.
    """
    if not cell.is_formula:
        return cell.value
    if cache is None:
        cache = {}
    if cell.coordinate in cache:
        return _cached(cache, cell.coordinate)
    if active is None:
        active = set()
        _prime(sheet, cell, cache)
        if cell.coordinate in cache:
            return _cached(cache, cell.coordinate)
    active.add(cell.coordinate)
    try:
        result = sheet.evaluator.evaluate(cell.value[1:], _make_resolver(sheet, active, cache))
    except EvaluationError as exc:
        cache[cell.coordinate] = exc
        raise
    finally:
        active.discard(cell.coordinate)
    cache[cell.coordinate] = result
    return result


def evaluate(sheet, cell, cache=None):
    """Displayed value of ``cell``: its value, or an ErrorValue. Never raises."""
    try:
        return evaluate_value(sheet, cell, cache=cache)
    except EvaluationError as exc:
        logger.debug("%s: %s", cell.coordinate, exc)
        return ErrorValue(str(exc))


def display_text(value) -> str:
    if is_error(value):
        return ERROR_DISPLAY
    return format_value(value)
