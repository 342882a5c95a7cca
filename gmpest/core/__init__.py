# gmpest/core/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------

"""
Core components of the gmpest package.

This subpackage contains the numerical routines of the estimator:
event grouping and separation distances, the profile likelihood,
scores and Fisher information, the scoring optimizer with step
halving, the modified Cholesky solver, and asymptotic inference.

Public API
----------
Model : class
    Ground-motion model façade.
estimate : function
    One-call estimation entry point.
MeanFunction, CallableMeanFunction : classes
    Mean-function interface.
EstimationResult : class
    Result record.
"""

from .mean import MeanFunction, CallableMeanFunction
from .result import EstimationResult, ParameterSet, InformationCriteria
from .model import Model, estimate

__all__ = [
    "Model",
    "estimate",
    "MeanFunction",
    "CallableMeanFunction",
    "EstimationResult",
    "ParameterSet",
    "InformationCriteria",
]
