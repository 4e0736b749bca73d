# -*- coding: utf-8 -*-
"""
Geometries of the emitting cloud and the corresponding photon escape
probability.
"""
import numpy as np
from pyjadex import escape_probability_functions


class UniformSphere():

    '''Represents the escape probability from a static, uniform sphere'''

    name = 'sphere'

    def __init__(self):
        self.beta = escape_probability_functions.beta_uniform_sphere


class LVGSphere():

    '''Represents the escape probability from an expanding sphere (large
    velocity gradient or Sobolev approximation)'''

    name = 'lvg'

    def __init__(self):
        self.beta = escape_probability_functions.beta_LVG_sphere


class UniformSlab():

    '''Represents the escape probability from a plane-parallel slab, for
    example a shock'''

    name = 'slab'

    def __init__(self):
        self.beta = escape_probability_functions.beta_slab


geometries = {'sphere':UniformSphere,'lvg':LVGSphere,'slab':UniformSlab}


def get_geometry(geometry):
    '''Returns an instance of the geometry class with the given name.

    Raises:
        ValueError: If the geometry is unknown.
    '''
    try:
        return geometries[geometry]()
    except (KeyError,TypeError):
        raise ValueError(f'unknown geometry "{geometry}"; available geometries:'
                         +f' {", ".join(geometries)}') from None


def escape_probability(tau,geometry):
    '''Computes the probability that a photon escapes the cloud.

    Args:
        tau (:obj:`float` or numpy.ndarray): optical depth of the line
        geometry (:obj:`str`): one of "sphere", "lvg" or "slab"

    Returns:
        float or numpy.ndarray: the escape probability, between 0 and 1

    Raises:
        ValueError: If the geometry is unknown.
    '''
    geo = get_geometry(geometry)
    tau_array = np.ascontiguousarray(np.ravel(tau),dtype=np.float64)
    beta = geo.beta(tau_array)
    if np.ndim(tau) == 0:
        return float(beta[0])
    return beta.reshape(np.shape(tau))
