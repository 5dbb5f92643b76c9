"""Exception hierarchy for the POS core.

Not-found and access-denied outcomes of bill viewing are not exceptions;
see :mod:`dajaj_pos.billing.access`.
"""

from __future__ import annotations


class PosError(Exception):
    """Base class for errors surfaced to the interactive layer."""


class UnknownMenuItemError(PosError, KeyError):
    """A product, variant or add-on id that the menu does not define."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable.
        return str(self.args[0]) if self.args else ""


class AddonNotApplicableError(PosError, ValueError):
    """An add-on was selected for a variant it has no price for."""


class OrderValidationError(PosError, ValueError):
    """The order cannot be finalized (missing customer name, empty cart)."""


class BillAllocationError(PosError):
    """A bill number or public token could not be allocated."""


class BillPersistenceError(PosError):
    """The bill document could not be written to the store."""


class InvalidMobileNumberError(PosError, ValueError):
    """A recipient mobile number does not reduce to 10 digits."""


class BillRetrievalError(PosError):
    """Stored bills could not be read from the store."""
