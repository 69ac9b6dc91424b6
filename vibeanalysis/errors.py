from __future__ import annotations


class InvalidInputError(ValueError):
    """A caller handed the engine input that breaks its contract.

    Raised for unequal axis lengths, empty batches, non-positive sampling
    rates or time steps, and payloads with wrongly-typed samples.
    """
