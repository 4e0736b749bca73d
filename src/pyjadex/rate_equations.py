#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Rate equations of the statistical equilibrium and their solution.
"""

import numba as nb
import numpy as np
from pyjadex import atomic_transition,background,helpers


class OpticalDepthWarning(UserWarning):
    '''Issued when some lines have an optical depth that makes convergence
    difficult'''


@nb.jit(nopython=True,cache=True)
def add_radiative_rates(yrate,iupp,ilow,aeinst,gstat,beta,exr):
    #yrate[i,j] multiplies the population of level j in the equation of level i;
    #beta is the escape probability and exr the photon occupation number of the
    #local radiation field
    for i in range(iupp.size):
        m = iupp[i]
        n = ilow[i]
        emission = aeinst[i]*(beta[i]+exr[i])
        absorption = aeinst[i]*gstat[m]/gstat[n]*exr[i]
        yrate[m,m] += emission
        yrate[n,n] += absorption
        yrate[m,n] -= absorption
        yrate[n,m] -= emission


def solve_reduced_system(yrate,rhs,reduced_levels):
    '''Solves the linear system after eliminating the levels that are not in
    reduced_levels. The normalisation equation (last row) is always kept.'''
    keep = np.zeros(rhs.size,dtype=bool)
    keep[reduced_levels] = True
    keep[-1] = True
    eliminated = ~keep
    A = yrate[np.ix_(keep,keep)]
    B = yrate[np.ix_(keep,eliminated)]
    C = yrate[np.ix_(eliminated,keep)]
    D = yrate[np.ix_(eliminated,eliminated)]
    #cascade through the eliminated (radiatively coupled) levels
    D_inv_C = np.linalg.solve(D,C)
    D_inv_rhs = np.linalg.solve(D,rhs[eliminated])
    uarray = A - np.dot(B,D_inv_C)
    solution = np.empty_like(rhs)
    solution[keep] = np.linalg.solve(uarray,rhs[keep]-np.dot(B,D_inv_rhs))
    solution[eliminated] = D_inv_rhs - np.dot(D_inv_C,solution[keep])
    return solution


def solve_step(yrate,rhs,reduced_levels=None):
    '''Solves the rate equations for the level populations.

    Args:
        yrate (numpy.ndarray): the rate matrix, shape (nlev+1,nlev+1)
        rhs (numpy.ndarray): the right hand side, shape (nlev+1,)
        reduced_levels (numpy.ndarray): if not None, the indices of the levels
            kept when solving the reduced system

    Returns:
        numpy.ndarray: fractional level populations, normalised to 1 and not
        smaller than helpers.minpop
    '''
    nlev = rhs.size-1
    if reduced_levels is None:
        solution = np.linalg.solve(yrate,rhs)
    else:
        solution = solve_reduced_system(yrate=yrate,rhs=rhs,
                                        reduced_levels=reduced_levels)
    level_pop = solution[:nlev]/np.sum(solution[:nlev])
    return np.maximum(level_pop,helpers.minpop)


class RateEquations():

    '''Assembles the rate equations of the statistical equilibrium for one set
    of physical conditions.

    Attributes:
        rundef (pyjadex.run_definition.RunDef): the physical conditions
        background (pyjadex.background.Background): the background field
        crate (numpy.ndarray): collisional rates, crate[i,j] being the rate
            [s-1] from level i to level j
        ctot (numpy.ndarray): total collisional rate out of each level [s-1]
        reduced_levels (numpy.ndarray or None): the levels kept in the reduced
            system, or None if the full system is solved
    '''

    thick_tau = 1e-2
    fat_tau = 1e5

    def __init__(self,rundef,background_field=None,reduce_matrix=False):
        self.rundef = rundef
        self.molecule = rundef.mol
        if background_field is None:
            background_field = background.compute_background(
                                         tbg=rundef.tbg,xnu=self.molecule.xnu)
        self.background = background_field
        self.crate = self.molecule.collision_rates(
                          collider=rundef.collider,density=rundef.density,
                          Tkin=rundef.tkin)
        self.ctot = np.sum(self.crate,axis=1)
        #crate has no diagonal elements, so this is diag(ctot) - offdiagonal inflow:
        self.collision_matrix = np.diag(self.ctot) - np.transpose(self.crate)
        self.reduced_levels = None
        if reduce_matrix:
            reduced_levels = self.collisionally_dominated_levels()
            if 0 < reduced_levels.size < self.molecule.nlev:
                self.reduced_levels = reduced_levels

    def collisionally_dominated_levels(self):
        '''Levels with an energy below 10*Tkin, which are assumed to be
        populated mostly by collisions'''
        redcrit = 10*self.rundef.tkin/helpers.fk
        return np.flatnonzero(self.molecule.eterm <= redcrit)

    def init_matrix(self):
        nlev = self.molecule.nlev
        roundoff = helpers.eps*self.rundef.totdens
        rhs = np.full(nlev+1,roundoff)
        yrate = np.full((nlev+1,nlev+1),-roundoff)
        yrate[:nlev,nlev] = roundoff
        #normalisation: replaces the redundant equation of statistical equilibrium
        yrate[nlev,:nlev] = 1
        yrate[nlev,nlev] = 0
        return rhs,yrate

    def optical_depth(self,level_population):
        '''Optical depth at line centre of all lines'''
        mol = self.molecule
        return atomic_transition.tau(
                     cddv=self.rundef.cddv,xnu=mol.xnu,A21=mol.aeinst,
                     g_low=mol.gstat[mol.ilow],g_up=mol.gstat[mol.iupp],
                     x1=level_population[mol.ilow],x2=level_population[mol.iupp])

    def source_function(self,tex):
        '''Planck function at the excitation temperature of each line'''
        xnu = self.molecule.xnu
        with np.errstate(divide='ignore'):
            x = helpers.fk*xnu/tex
        return helpers.thc*xnu**3*helpers.photon_occupation(x)

    def radiative_terms(self,state):
        '''Escape probability and photon occupation number of the radiation
        field for each line. Also updates the optical depth and the number of
        optically thick lines of the state.'''
        mol = self.molecule
        if state.niter == 0:
            #optically thin, background radiation only
            beta = np.ones(mol.nline)
            with np.errstate(divide='ignore'):
                etr = helpers.fk*mol.xnu/self.background.trj
            exr = helpers.photon_occupation(etr)
            return beta,exr
        state.taul = self.optical_depth(state.xpop)
        state.nthick = int(np.count_nonzero(state.taul > self.thick_tau))
        state.nfat = int(np.count_nonzero(state.taul > self.fat_tau))
        if state.niter == 1 and state.nfat > 0:
            state.record_warning('some lines have very high optical depth',
                                 category=OpticalDepthWarning)
        beta = self.rundef.escape.beta(state.taul)
        exr = self.background.totalb*beta/(helpers.thc*mol.xnu**3)
        return beta,exr

    def build(self,state):
        '''Assembles the rate matrix for the current iteration.

        Args:
            state (pyjadex.radiative_transfer.SolverState): the state of the
                iteration; on iteration 0, the radiation field is given by the
                background alone

        Returns:
            tuple: rhs with shape (nlev+1,) and the rate matrix yrate with
            shape (nlev+1,nlev+1)
        '''
        mol = self.molecule
        rhs,yrate = self.init_matrix()
        beta,exr = self.radiative_terms(state=state)
        add_radiative_rates(yrate=yrate,iupp=mol.iupp,ilow=mol.ilow,
                            aeinst=mol.aeinst,gstat=mol.gstat,beta=beta,exr=exr)
        yrate[:mol.nlev,:mol.nlev] += self.collision_matrix
        return rhs,yrate

    def solve(self,rhs,yrate):
        return solve_step(yrate=yrate,rhs=rhs,reduced_levels=self.reduced_levels)
