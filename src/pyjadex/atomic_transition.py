# -*- coding: utf-8 -*-
"""
Levels and transitions of an atom or molecule.

Energies are given in [cm-1] as in the LAMDA files; level indices start at 0.
"""

from pyjadex import helpers
import numpy as np
import numba as nb


@nb.jit(nopython=True,cache=True,error_model='numpy')
def tau(cddv,xnu,A21,g_low,g_up,x1,x2):
    '''Optical depth at line centre for a Gaussian profile, with cddv the
    column density divided by the line width [cm-2/(cm/s)] and x1, x2 the
    fractional populations of the lower and upper level'''
    return cddv*(x1*g_up/g_low-x2)/(helpers.fgauss*xnu**3/A21)

@nb.jit(nopython=True,cache=True,error_model='numpy')
def Tex(xnu,g_low,g_up,x1,x2):
    '''Excitation temperature from the fractional populations x1 (lower level)
    and x2 (upper level)'''
    return helpers.fk*xnu/np.log(x1*g_up/(x2*g_low))

@nb.jit(nopython=True,cache=True)
def compute_K12(K21,g_up,g_low,xnu,Tkin):
    #detailed balance
    return g_up/g_low*K21*np.exp(-helpers.fk*xnu/Tkin)


class Level():
    '''Represents an atomic / molecular level.

    Attributes:
        E (:obj:`float`): the term energy of the level in [cm-1]
        g (:obj:`float`): the statistical weight of the level
        index (:obj:`int`): position of the level in the data file, with the
            first level having index 0
        label (:obj:`str`): label of the level, usually its quantum numbers
    '''

    def __init__(self,E,g,index,label=''):
        if g <= 0:
            raise ValueError(f'level {index}: statistical weight must be positive')
        self.E = E
        self.g = g
        self.index = index
        self.label = label

    def LTE_level_pop(self,Z,T):
        '''Fractional population of the level in LTE at temperature T [K],
        given the partition function Z'''
        return self.g*np.exp(-helpers.fk*self.E/T)/Z

    def __repr__(self):
        return f'Level(index={self.index}, E={self.E:g} cm-1, g={self.g:g})'


class Transition():

    def __init__(self,up,low):
        if up.index == low.index:
            raise ValueError(f'transition connects level {up.index} with itself')
        self.up = up
        self.low = low
        self.xnu = self.up.E-self.low.E
        self.name = f'{self.up.index+1}-{self.low.index+1}'


class RadiativeTransition(Transition):

    r'''Represents the radiative transition between two energy levels.

    Attributes:
        up (pyjadex.atomic_transition.Level): the upper level of the transition
        low (pyjadex.atomic_transition.Level): the lower level of the transition
        xnu (:obj:`float`): energy difference between upper and lower level
            in [cm\ :sup:`-1`]
        name (:obj:`str`): name of the transition ("up-low", with levels
            counted from 1 as in the data file)
        A21 (:obj:`float`): Einstein A21 coefficient in [s\ :sup:`-1`]
        spfreq (:obj:`float`): rest frequency in [GHz]
        Eup (:obj:`float`): energy of the upper level in [K]
    '''

    def __init__(self,up,low,A21,spfreq=None,Eup=None):
        Transition.__init__(self,up=up,low=low)
        if not self.xnu > 0:
            raise ValueError(f'transition {self.name}: upper level must lie'
                             +' above the lower level')
        if A21 < 0:
            raise ValueError(f'transition {self.name}: negative Einstein A')
        self.A21 = A21
        if spfreq is None:
            spfreq = helpers.xnu_to_frequency(self.xnu)/1e9
        self.spfreq = spfreq
        self.Eup = helpers.fk*self.up.E if Eup is None else Eup

    def Tex(self,x1,x2):
        '''Computes the excitation temperature.

        Args:
            x1: (numpy.ndarray): fractional population of the lower level
            x2: (numpy.ndarray): fractional population of the upper level

        Returns:
            numpy.ndarray: excitation temperature in [K]
        '''
        return Tex(xnu=self.xnu,g_low=self.low.g,g_up=self.up.g,x1=x1,x2=x2)

    def __repr__(self):
        return f'RadiativeTransition({self.name}, {self.spfreq:.6f} GHz)'


class CollisionalTransition(Transition):

    '''Represents the collisional transition between two energy levels

    Attributes:
        up (pyjadex.atomic_transition.Level): the upper level of the transition
        low (pyjadex.atomic_transition.Level): the lower level of the transition
        K21_data (numpy.ndarray): downward rate coefficients in [cm3/s] at the
            temperatures Tkin_data
        Tkin_data (numpy.ndarray): temperatures in [K]
    '''

    def __init__(self,up,low,K21_data,Tkin_data):
        Transition.__init__(self,up=up,low=low)
        K21_data = np.asarray(K21_data,dtype=float)
        Tkin_data = np.asarray(Tkin_data,dtype=float)
        if K21_data.shape != Tkin_data.shape:
            raise ValueError(f'collisional transition {self.name}: number of rates'
                             +' does not match number of temperatures')
        if np.any(K21_data < 0):
            raise ValueError(f'collisional transition {self.name}: negative rate')
        self.K21_data = K21_data
        self.Tkin_data = Tkin_data
