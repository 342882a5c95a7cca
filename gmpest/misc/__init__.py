# gmpest/misc/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Miscellaneous utility modules for gmpest.

plotutils is not imported here since it loads matplotlib.pyplot;
use ``import gmpest.misc.plotutils``.
"""

from . import dataframe
from . import gmpe
from . import synthetic
