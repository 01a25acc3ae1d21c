import ast
import datetime
import logging
from collections.abc import Mapping

import numpy as np

import coordinates
from cell_values import MAX_INT_BITS, fits_int, format_value, is_error, kind_of, normalize
from errors import EvaluationError, FormulaSyntaxError, UnresolvedName

logger = logging.getLogger(__name__)

MAX_EXPONENT = 10000

_ALLOWED_NODES = (
    ast.Expression,
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.Name,
    ast.Load,
    ast.Constant,
    ast.Tuple,
    ast.List,
    ast.Add,
    ast.Sub,
    ast.Mult,
    ast.Div,
    ast.FloorDiv,
    ast.Mod,
    ast.Pow,
    ast.USub,
    ast.UAdd,
    ast.Not,
    ast.And,
    ast.Or,
    ast.Eq,
    ast.NotEq,
    ast.Lt,
    ast.LtE,
    ast.Gt,
    ast.GtE,
)

_ADD = "__add"
_POW = "__pow"


def _is_number(value) -> bool:
    return kind_of(value) == "number"


def _checked(value):
    if isinstance(value, int) and not isinstance(value, bool) and not fits_int(value):
        raise EvaluationError("Number too large")
    return value


def add(left, right):
    """Addition as formulas see it; also used to join two cells."""
    left = normalize(left)
    right = normalize(right)
    if is_error(left) or is_error(right):
        raise EvaluationError("Cannot add error values")
    if _is_number(left) and _is_number(right):
        return _checked(left + right)
    if isinstance(left, str) and isinstance(right, str):
        return left + right
    if kind_of(left) == "date" and _is_number(right):
        return left + datetime.timedelta(days=right)
    if _is_number(left) and kind_of(right) == "date":
        return right + datetime.timedelta(days=left)
    raise EvaluationError(f"Cannot add {kind_of(left)} and {kind_of(right)}")


def _power(base, exponent):
    if _is_number(exponent) and abs(exponent) > MAX_EXPONENT:
        raise EvaluationError("Exponent too large")
    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0:
        if (base.bit_length() - 1) * exponent > MAX_INT_BITS:
            raise EvaluationError("Number too large")
    return base**exponent


def _flatten(args):
    for arg in args:
        if isinstance(arg, (list, tuple)):
            yield from _flatten(arg)
        else:
            yield normalize(arg)


def _numbers(args):
    return [v for v in _flatten(args) if _is_number(v)]


def _sum(*args):
    values = _numbers(args)
    if not values:
        return 0
    return np.sum(values)


def _average(*args):
    values = _numbers(args)
    if not values:
        raise EvaluationError("AVG of no values")
    return np.mean(values)


def _min(*args):
    values = _numbers(args)
    if not values:
        raise EvaluationError("MIN of no values")
    return np.min(values)


def _max(*args):
    values = _numbers(args)
    if not values:
        raise EvaluationError("MAX of no values")
    return np.max(values)


def _count(*args):
    return len(_numbers(args))


def _round(value, digits=0):
    result = round(value, int(digits))
    return int(result) if int(digits) <= 0 else result


def _int(value):
    return int(np.floor(value))


def _concat(*args):
    return "".join(format_value(v) for v in _flatten(args))


def _if(condition, when_true, when_false=False):
    return when_true if condition else when_false


def _today():
    return datetime.date.today()


def _now():
    return datetime.datetime.now().time().replace(microsecond=0)


FUNCTIONS = {
    "SUM": _sum,
    "AVG": _average,
    "AVERAGE": _average,
    "MIN": _min,
    "MAX": _max,
    "COUNT": _count,
    "ABS": abs,
    "ROUND": _round,
    "INT": _int,
    "LEN": lambda text: len(str(text)),
    "UPPER": lambda text: str(text).upper(),
    "LOWER": lambda text: str(text).lower(),
    "CONCAT": _concat,
    "IF": _if,
    "TODAY": _today,
    "NOW": _now,
}

CONSTANTS = {
    "true": True,
    "false": False,
    "TRUE": True,
    "FALSE": False,
}


def _parse(text):
    if not text:
        raise FormulaSyntaxError("Empty formula")
    try:
        return ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise FormulaSyntaxError(f"Syntax error: {exc.msg}") from exc
    except (ValueError, RecursionError, MemoryError) as exc:
        raise FormulaSyntaxError("Formula too complex") from exc


def _rectangle(start, end):
    """Coordinates of the block between two corner names, row by row."""
    first = coordinates.parse(str(start))
    last = coordinates.parse(str(end))
    if first is None or last is None:
        raise EvaluationError(f"Invalid range: {start}:{end}")
    return [
        coordinates.Coordinate(column, row)
        for row in range(min(first.row, last.row), max(first.row, last.row) + 1)
        for column in range(min(first.column, last.column), max(first.column, last.column) + 1)
    ]


def _is_literal_range(node) -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == "RANGE"
        and len(node.args) == 2
        and all(isinstance(arg, ast.Constant) and isinstance(arg.value, str) for arg in node.args)
    )


class _OperatorRewriter(ast.NodeTransformer):
    """Route ``+`` and ``**`` through the formula helpers."""

    def visit_BinOp(self, node):
        self.generic_visit(node)
        if isinstance(node.op, ast.Add):
            helper = _ADD
        elif isinstance(node.op, ast.Pow):
            helper = _POW
        else:
            return node
        call = ast.Call(
            func=ast.Name(id=helper, ctx=ast.Load()),
            args=[node.left, node.right],
            keywords=[],
        )
        return ast.copy_location(call, node)


class _Names(Mapping):
    """Local namespace handed to eval: every free name goes to the resolver."""

    def __init__(self, resolve, builtins):
        self._resolve = resolve
        self._builtins = builtins

    def __getitem__(self, name):
        if name in self._builtins:
            raise KeyError(name)
        return self._resolve(name)

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


class FormulaEvaluator:
    """Evaluates formula source (without the leading marker).

    Formulas are restricted Python expressions: arithmetic, comparisons,
    ``and``/``or``/``not``, conditional expressions and calls to the
    functions in ``FUNCTIONS``. Every other name is handed to the caller's
    resolver, which either returns a value or raises ``UnresolvedName``.
    """

    def __init__(self, functions=None):
        self.functions = dict(FUNCTIONS)
        if functions:
            self.functions.update(functions)
        self._compiled = {}

    # ---------- parsing ----------
    def _check(self, tree):
        for node in ast.walk(tree):
            if not isinstance(node, _ALLOWED_NODES):
                raise FormulaSyntaxError(f"Unsupported syntax: {type(node).__name__}")
            if isinstance(node, ast.Call):
                if not isinstance(node.func, ast.Name):
                    raise FormulaSyntaxError("Only named functions can be called")
                name = node.func.id
                if name != "RANGE" and name not in self.functions:
                    raise FormulaSyntaxError(f"Unknown function: {name}")
                if node.keywords:
                    raise FormulaSyntaxError("Keyword arguments are not supported")
            if isinstance(node, ast.Name) and node.id.startswith("__"):
                raise FormulaSyntaxError(f"Invalid name: {node.id}")

    def compile(self, source: str):
        code = self._compiled.get(source)
        if code is not None:
            return code
        tree = _parse(source.strip())
        self._check(tree)
        try:
            tree = ast.fix_missing_locations(_OperatorRewriter().visit(tree))
            code = compile(tree, "<formula>", "eval")
        except (RecursionError, MemoryError) as exc:
            raise FormulaSyntaxError("Formula too complex") from exc
        self._compiled[source] = code
        return code

    def references(self, source: str):
        """Coordinates ``source`` names directly, with literal RANGE corners expanded.

        Unparsable source has no references; evaluating it reports the error.
        """
        try:
            tree = _parse(source.strip())
        except FormulaSyntaxError:
            return []
        found = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Name):
                coordinate = coordinates.parse(node.id)
                if coordinate is not None:
                    found.append(coordinate)
            elif _is_literal_range(node):
                found.extend(_rectangle(*(arg.value for arg in node.args)))
        return list(dict.fromkeys(found))

    # ---------- evaluation ----------
    def _range(self, resolve):
        def _range_fn(start, end):
            values = []
            for coordinate in _rectangle(start, end):
                try:
                    values.append(resolve(coordinate.name))
                except UnresolvedName:
                    continue
            return values

        return _range_fn

    def evaluate(self, source: str, resolve):
        """Evaluate ``source``; ``resolve(name)`` supplies referenced values.

        Raises EvaluationError (or a subclass) on any failure.
        """
        code = self.compile(source)
        env = dict(self.functions)
        env.update(CONSTANTS)
        env["RANGE"] = self._range(resolve)
        env[_ADD] = add
        env[_POW] = _power
        env["__builtins__"] = {}
        names = _Names(resolve, env)
        try:
            result = eval(code, env, names)
        except EvaluationError:
            raise
        except (ArithmeticError, TypeError, ValueError, RecursionError, MemoryError) as exc:
            logger.debug("formula %r failed: %s", source, exc)
            raise EvaluationError(str(exc) or type(exc).__name__) from exc
        result = normalize(result)
        if kind_of(result) in (None, "error"):
            raise EvaluationError("Formula does not produce a single value")
        return _checked(result)
