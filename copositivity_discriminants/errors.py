"""Exceptions raised by the copositivity check."""


class InputError(ValueError):
    """The polynomial violates a precondition of the homotopy method."""


class OracleFailure(RuntimeError):
    """The certified solver crashed or could not be started."""


class EnumerationLimitError(RuntimeError):
    """Regular triangulation enumeration exceeded its configured bound."""

    def __init__(self, limit):
        super().__init__(f"more than {limit} regular triangulations; raise max_triangulations")
        self.limit = limit


class EnumerationTimeoutError(RuntimeError):
    """Regular triangulation enumeration ran past its wall-clock budget."""

    def __init__(self, budget):
        super().__init__(f"regular triangulations not exhausted within {budget} s; raise time_budget")
        self.budget = budget
