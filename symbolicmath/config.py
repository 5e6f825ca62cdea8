from dataclasses import dataclass

import numpy as np


@dataclass
class NumericsConfig:
    def __init__(self, dtype=np.float64, zero_tol: float = 0.0):
        """
        Configuration class for numeric settings.

        This class defines how constants and coefficient matrices are stored.

        Args:
            dtype: The numpy dtype used for constant vectors and for every matrix or vector
                returned by linearization. Defaults to np.float64.
            zero_tol (float): Monomials whose coefficient magnitude is at or below this value are
                dropped when like terms of a polynomial are merged. The default of 0.0 only
                drops exact zeros, which keeps linearization exact.
        """
        self.dtype = dtype
        self.zero_tol = zero_tol

    def __repr__(self):
        return f"NumericsConfig(dtype={np.dtype(self.dtype).name}, zero_tol={self.zero_tol})"


numerics = NumericsConfig()


def get_numerics() -> NumericsConfig:
    """Return the numeric configuration currently in use."""
    return numerics


def set_numerics(config: NumericsConfig) -> NumericsConfig:
    """Replace the numeric configuration and return the previous one.

    Args:
        config: The new configuration

    Returns:
        NumericsConfig: The configuration that was active before the call
    """
    global numerics
    if not isinstance(config, NumericsConfig):
        raise TypeError(f"expected a NumericsConfig, got {type(config).__name__}")
    previous = numerics
    numerics = config
    return previous
