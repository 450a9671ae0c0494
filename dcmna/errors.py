"""Error taxonomy for the DC solver.

Two failure kinds reach the caller:
    - InvalidTopology: the payload itself is malformed (bad node count,
      terminal out of range, missing or non-numeric values).
    - SingularMatrix: the payload is well formed but the circuit has no
      unique DC solution (floating subnetwork, redundant sources).
"""

from __future__ import annotations


class CircuitError(Exception):
    """Base class for every solver failure."""

    kind = "circuit_error"

    def to_json(self) -> dict:
        return {"error": self.kind, "detail": str(self)}


class InvalidTopology(CircuitError):
    """The circuit description violates the payload contract."""

    kind = "invalid_topology"

    def __init__(self, message: str, reference: str | None = None):
        super().__init__(message)
        self.reference = reference

    def to_json(self) -> dict:
        body = super().to_json()
        if self.reference is not None:
            body["reference"] = self.reference
        return body


class SingularMatrix(CircuitError):
    """The MNA system has no unique solution."""

    kind = "singular_matrix"

    def __init__(self, message: str, column: int | None = None):
        super().__init__(message)
        self.column = column

    def to_json(self) -> dict:
        body = super().to_json()
        body["column"] = self.column
        return body
