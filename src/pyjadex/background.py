# -*- coding: utf-8 -*-
"""
Background radiation field seen by the cloud.
"""
import numpy as np
from pyjadex import helpers


class Background():

    r'''Represents the background radiation field at the frequency of each line.

    Attributes:
        trj (numpy.ndarray): radiation temperature of the background in [K]
        backi (numpy.ndarray): background intensity in
            [erg/s/cm\ :sup:`2`/Hz/sr]
        totalb (numpy.ndarray): total background intensity in
            [erg/s/cm\ :sup:`2`/Hz/sr]; equal to backi since only the black body
            background is considered
    '''

    def __init__(self,trj,backi,totalb=None):
        self.trj = np.asarray(trj,dtype=float)
        self.backi = np.asarray(backi,dtype=float)
        self.totalb = self.backi.copy() if totalb is None\
                           else np.asarray(totalb,dtype=float)
        assert self.trj.shape == self.backi.shape == self.totalb.shape

    @classmethod
    def from_temperature(cls,tbg,xnu):
        '''Alternative constructor, computing the black body background at
        temperature tbg [K] for transitions with energy difference xnu [cm-1]'''
        xnu = np.asarray(xnu,dtype=float)
        #a background at 0 K gives a saturated exponent for all lines
        with np.errstate(divide='ignore'):
            hnu = helpers.fk*xnu/tbg
        saturated = hnu >= helpers.max_exponent
        backi = np.empty_like(xnu)
        backi[saturated] = helpers.eps
        backi[~saturated] = helpers.thc*xnu[~saturated]**3/np.expm1(hnu[~saturated])
        trj = np.full_like(xnu,tbg)
        return cls(trj=trj,backi=backi)

    @property
    def nline(self):
        return self.trj.size


def compute_background(tbg,xnu):
    '''Computes the background intensity and radiation temperature for each
    line from a black body at temperature tbg [K].

    Args:
        tbg (:obj:`float`): temperature of the background in [K]
        xnu (numpy.ndarray): energy difference of the transitions in [cm-1]

    Returns:
        Background: the background radiation field
    '''
    return Background.from_temperature(tbg=tbg,xnu=xnu)
