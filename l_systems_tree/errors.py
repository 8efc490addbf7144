"""Exceptions raised while rewriting or interpreting an L-system."""


class LSystemError(Exception):
    """Base class for every error raised by l_systems_tree."""


class InvalidGrammar(LSystemError, ValueError):
    """Grammar parameters failed validation before any rewriting happened."""


class GrammarOverflow(LSystemError):
    """The rewritten string would grow past the configured length limit."""

    def __init__(self, iteration: int, length: int, limit: int):
        self.iteration = iteration
        self.length = length
        self.limit = limit
        super().__init__(
            f"iteration {iteration} would produce {length} symbols "
            f"(limit is {limit}); reduce the iteration count or rule expansion"
        )


class UnbalancedBranches(LSystemError):
    """A branch-close symbol was met with no open branch left to close."""

    def __init__(self, index: int, symbol: str = "]"):
        self.index = index
        self.symbol = symbol
        super().__init__(
            f"unbalanced branch close '{symbol}' at symbol index {index}"
        )
