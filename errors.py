class LeviteError(Exception):
    """Base class for errors raised inside levite."""


class EvaluationError(LeviteError):
    """Raised by the formula evaluator; never escapes evaluation.evaluate."""


class FormulaSyntaxError(EvaluationError):
    pass


class UnresolvedName(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"Unresolved name: {name}")
        self.name = name


class CircularReference(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"Circular reference: {name}")
        self.name = name


class CsvError(LeviteError):
    pass


class UsageError(LeviteError):
    pass
