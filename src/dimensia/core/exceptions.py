# dimensia.core.exceptions

from __future__ import annotations


class DimensionError(TypeError):
    """
    Raised when an operation demands matching physical dimensions and the
    operands (or an operand and a conversion target) do not share one.

    Subclasses ``TypeError`` so that code treating a dimension mismatch as a
    type mismatch keeps working.
    """

    def __init__(self, left: object = None, right: object = None, op: str | None = None) -> None:
        self.left = left
        self.right = right
        self.op = op
        if left is None and right is None:
            msg = "dimension mismatch"
        else:
            msg = f"dimension mismatch between {left!r} and {right!r}"
        if op:
            msg = f"{op}: {msg}"
        super().__init__(msg)


class IrrationalExponentError(ValueError):
    """A float exponent is not finite (``inf`` or ``nan``) and has no rational form."""


__all__ = ["DimensionError", "IrrationalExponentError"]
