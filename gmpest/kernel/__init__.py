# gmpest/kernel/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Covariance models for event-grouped ground-motion residuals.

Modules
-------
base
    CovarianceModel interface and token registry.
nugget
    'No': inter-event variance plus independent intra-event residuals.
exponential
    'Exp' and anisotropic 'ExpAni' exponential models.
squared_exponential
    'SExp' squared exponential model.
matern
    'Matern1.5' Matérn model with regularity 3/2.

Public API
-----------
- get_covariance_model, available_covariance_models
- CovarianceModel and the five concrete models
- exponential_kernel, squared_exponential_kernel, matern32_kernel
"""

from .base import (
    CovarianceModel,
    IsotropicCovarianceModel,
    available_covariance_models,
    get_covariance_model,
    register_covariance_model,
)
from .nugget import NoCorrelation
from .exponential import Exponential, AnisotropicExponential, exponential_kernel
from .squared_exponential import SquaredExponential, squared_exponential_kernel
from .matern import Matern15, matern32_kernel

__all__ = [
    # Interface
    "CovarianceModel",
    "IsotropicCovarianceModel",
    "available_covariance_models",
    "get_covariance_model",
    "register_covariance_model",
    # Models
    "NoCorrelation",
    "Exponential",
    "SquaredExponential",
    "Matern15",
    "AnisotropicExponential",
    # Kernels
    "exponential_kernel",
    "squared_exponential_kernel",
    "matern32_kernel",
]
