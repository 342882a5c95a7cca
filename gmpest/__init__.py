# gmpest/__init__.py

from . import config
from . import errors
from . import num
from . import kernel
from . import core
from . import misc
from .core import Model, estimate, MeanFunction, CallableMeanFunction
from .errors import GMPEstError, ConfigurationError, NumericalError, NonConvergenceError

__all__ = [
    "num",
    "kernel",
    "Model",
    "estimate",
    "MeanFunction",
    "CallableMeanFunction",
    "GMPEstError",
    "ConfigurationError",
    "NumericalError",
    "NonConvergenceError",
    "__version__",
]

__version__ = config.__version__
