#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Observable line intensities computed from the solved level populations.
"""

import numpy as np
from scipy import constants
from pyjadex import helpers


def exp_tau_factor(tau):
    '''1-exp(-tau), with the first order expansion for small tau'''
    return np.where(np.abs(tau) < 1e-5,tau,-np.expm1(-tau))


def line_intensities(rundef,background_field,state):
    r'''Computes the line intensities for all lines within the frequency window
    of the run definition.

    The radiation temperature is the Rayleigh-Jeans equivalent temperature of
    the line emission after subtraction of the background. The line emission
    uses the source function stored in the state.

    Args:
        rundef (pyjadex.run_definition.RunDef): the physical conditions
        background_field (pyjadex.background.Background): the background
        state (pyjadex.radiative_transfer.SolverState): the solved state

    Returns:
        dict: one array per quantity, with one entry per line in the window:
        'index' (index of the line), 'name', 'spfreq' [GHz], 'eup' [K],
        'tex' [K], 'tau', 'pop_up', 'pop_low', 'T_R' [K],
        'flux_K_km_s' [K km/s] and 'flux_erg_cm2_s' [erg/cm\ :sup:`2`/s]
    '''
    mol = rundef.mol
    fmin,fmax = rundef.freq
    index = np.flatnonzero((mol.spfreq >= fmin) & (mol.spfreq <= fmax))
    xnu = mol.xnu[index]
    tex = state.tex[index]
    tau = state.taul[index]
    bnutex = state.source_function[index]
    backi = background_field.backi[index]
    #line emission minus the background absorbed by the line
    line_intensity = (bnutex-backi)*exp_tau_factor(tau)
    T_R = line_intensity/(helpers.thc*xnu**2/helpers.fk)
    deltav_kms = rundef.deltav*constants.centi/constants.kilo
    #1.0645 = sqrt(pi/(4 ln 2)): integral over a Gaussian line of unit peak and FWHM
    flux_K_km_s = 1.0645*deltav_kms*T_R
    flux_erg_cm2_s = helpers.fgauss*helpers.kboltz*rundef.deltav*T_R*xnu**2
    return {'index':index,
            'name':np.array([mol.rad_transitions[i].name for i in index],dtype=str),
            'spfreq':mol.spfreq[index],'eup':mol.eup[index],'tex':tex,'tau':tau,
            'pop_up':state.xpop[mol.iupp[index]],
            'pop_low':state.xpop[mol.ilow[index]],'T_R':T_R,
            'flux_K_km_s':flux_K_km_s,'flux_erg_cm2_s':flux_erg_cm2_s}
