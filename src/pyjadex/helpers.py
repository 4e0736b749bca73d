# -*- coding: utf-8 -*-
"""
Physical constants in CGS units and small numerical helpers.

Energies of levels and transitions are handled as wavenumbers in [cm-1],
so that the Planck function and the Boltzmann factor are written with
the combinations fk = h*c/k and thc = 2*h*c.
"""

import numpy as np
from scipy import constants
import numba as nb

#physical constants in CGS
clight = constants.c/constants.centi #[cm/s]
hplanck = constants.h/constants.erg #[erg s]
kboltz = constants.k/constants.erg #[erg/K]
fk = hplanck*clight/kboltz #[K cm]
thc = 2*hplanck*clight

#1.0645 = sqrt(pi/(4 ln 2)), area of a Gaussian of unit peak and unit FWHM
fgauss = 1.0645*8*np.pi

#round-off floor, used for the background intensity and the rate matrix
eps = 1e-30
#minimum level population
minpop = 1e-20
#exponents above this value are considered to saturate
max_exponent = 160.

T_CMB = 2.725


@nb.jit(nopython=True,cache=True)
def B_nu(xnu,T):
    r"""Planck function (black body) for a transition given in wavenumbers

    Args:
        xnu (numpy.ndarray): energy difference of the transition in [cm\ :sup:`-1`]
        T (:obj:`float` or numpy.ndarray): temperature in [K]

    Returns:
        numpy.ndarray: value of Planck function in [erg/s/cm\ :sup:`2`/Hz/sr]
    """
    return thc*xnu**3/(np.exp(fk*xnu/T)-1)

@nb.jit(nopython=True,cache=True,error_model='numpy')
def photon_occupation(x):
    '''1/(exp(x)-1), set to 0 where the exponent saturates'''
    occupation = np.zeros_like(x)
    for i in range(x.size):
        if x[i] < max_exponent:
            occupation[i] = 1/(np.exp(x[i])-1)
    return occupation

def xnu_to_frequency(xnu):
    '''Convert an energy difference in [cm-1] to a frequency in [Hz]'''
    return xnu*clight

@nb.jit(nopython=True,cache=True)
def assert_all_finite(x):
    assert np.all(np.isfinite(x))
