# -*- coding: utf-8 -*-
"""
Non-LTE excitation of interstellar molecules with the escape probability
method, in the manner of RADEX
"""

from . import helpers, LAMDA_file, molecule, run_definition, radiative_transfer
from importlib.metadata import version

__version__ = version("pyjadex")
