#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Iterative solution of the non-LTE level populations with the escape
probability method.
"""

import time
import warnings
import numpy as np
from pyjadex import atomic_transition,background,flux,helpers,rate_equations
from pyjadex.run_definition import RunDef


class ConvergenceWarning(UserWarning):
    '''Issued when the iteration stops before reaching convergence'''


class SolverState():

    r'''Holds the quantities that are carried from one iteration to the next.

    Attributes:
        xpop (numpy.ndarray): fractional level populations
        xpopold (numpy.ndarray): fractional level populations of the previous
            iteration
        tex (numpy.ndarray): excitation temperature of each line in [K]
        taul (numpy.ndarray): optical depth at line centre of each line
        source_function (numpy.ndarray): Planck function at the excitation
            temperature in [erg/s/cm\ :sup:`2`/Hz/sr]
        niter (:obj:`int`): the current iteration
        nthick (:obj:`int`): number of lines with optical depth above
            RateEquations.thick_tau
        nfat (:obj:`int`): number of lines with optical depth above
            RateEquations.fat_tau
        converged (:obj:`bool`): whether the iteration converged
        exhausted (:obj:`bool`): whether the iteration stopped because the
            maximum number of iterations or the time budget was reached
        warnings (:obj:`list`): messages of the warnings issued during the
            iteration
    '''

    def __init__(self,nlev,nline):
        self.xpop = np.zeros(nlev)
        self.xpopold = np.zeros(nlev)
        self.tex = np.zeros(nline)
        self.taul = np.zeros(nline)
        self.source_function = np.zeros(nline)
        self.niter = 0
        self.nthick = 0
        self.nfat = 0
        self.converged = False
        self.exhausted = False
        self.warnings = []

    @property
    def status(self):
        if self.converged:
            return 'converged'
        if self.exhausted:
            return 'exhausted'
        return 'running'

    def record_warning(self,message,category):
        warnings.warn(message,category)
        self.warnings.append(message)

    def copy(self):
        new_state = SolverState(nlev=self.xpop.size,nline=self.tex.size)
        for name,value in vars(self).items():
            if isinstance(value,np.ndarray):
                value = value.copy()
            elif isinstance(value,list):
                value = list(value)
            setattr(new_state,name,value)
        return new_state

    def __repr__(self):
        return f'SolverState(niter={self.niter}, status={self.status},'\
               +f' nthick={self.nthick})'


class Solver():

    '''Solves the statistical equilibrium of a molecule for the physical
    conditions given by a RunDef. The iteration starts from optically thin
    conditions with only the background radiation field, updates the escape
    probabilities from the current optical depths, and stops when the
    excitation temperatures of the optically thick lines no longer change.

    Attributes:
        rundef (pyjadex.run_definition.RunDef): the physical conditions
        background (pyjadex.background.Background): the background radiation
        rate_equations (pyjadex.rate_equations.RateEquations): the rate equations
        state (SolverState): the state after the last call to solve, or None
    '''

    miniter = 10
    maxiter = 9999
    ccrit = 1e-6
    underrelaxation = 0.3

    def __init__(self,rundef,reduce_matrix=False,verbose=False,max_time=None,
                 miniter=None,maxiter=None,ccrit=None):
        '''
        Args:
            rundef (pyjadex.run_definition.RunDef): the physical conditions
            reduce_matrix (:obj:`bool`): If True, the levels above 10 times the
                kinetic temperature are eliminated before solving the rate
                equations. Defaults to False.
            verbose (:obj:`bool`): Whether to print progress information.
                Defaults to False.
            max_time (:obj:`float`): Time budget of a call to solve, in [s].
                Defaults to None (no limit).
            miniter (:obj:`int`): minimum number of iterations. Defaults to
                Solver.miniter.
            maxiter (:obj:`int`): maximum number of iterations. Defaults to
                Solver.maxiter.
            ccrit (:obj:`float`): convergence criterion for the mean relative
                change of the excitation temperature of the optically thick
                lines. Defaults to Solver.ccrit.
        '''
        self.rundef = rundef
        self.molecule = rundef.mol
        if miniter is not None:
            self.miniter = miniter
        if maxiter is not None:
            self.maxiter = maxiter
        if ccrit is not None:
            self.ccrit = ccrit
        if max_time is not None and not max_time > 0:
            raise ValueError('max_time must be positive')
        self.max_time = max_time
        self.verbose = verbose
        self.background = background.compute_background(tbg=rundef.tbg,
                                                        xnu=self.molecule.xnu)
        self.rate_equations = rate_equations.RateEquations(
                                  rundef=rundef,background_field=self.background,
                                  reduce_matrix=reduce_matrix)
        self.state = None

    def new_state(self):
        return SolverState(nlev=self.molecule.nlev,nline=self.molecule.nline)

    def excitation_temperature(self,level_population):
        mol = self.molecule
        return atomic_transition.Tex(xnu=mol.xnu,g_low=mol.gstat[mol.ilow],
                                     g_up=mol.gstat[mol.iupp],
                                     x1=level_population[mol.ilow],
                                     x2=level_population[mol.iupp])

    def update_state(self,state,new_pop):
        '''Updates the state with the populations obtained from the rate
        equations.

        Args:
            state (SolverState): the state; modified in place
            new_pop (numpy.ndarray): the solution of the rate equations

        Returns:
            float: sum of the relative changes of the excitation temperature
            over the optically thick lines
        '''
        mol = self.molecule
        state.xpopold = state.xpop
        state.xpop = new_pop
        if state.niter == 0:
            state.xpopold = new_pop
        degenerate = (new_pop[mol.ilow] <= helpers.minpop)\
                                        | (new_pop[mol.iupp] <= helpers.minpop)
        thistex = self.excitation_temperature(new_pop)
        tsum = 0.
        if state.niter == 0:
            state.tex = np.where(degenerate,self.background.trj,thistex)
        else:
            thistex = np.where(degenerate,state.tex,thistex)
            #convergence is judged with the optical depth used to build the matrix
            thick = state.taul > self.rate_equations.thick_tau
            tsum = np.sum(np.abs((thistex[thick]-state.tex[thick])/thistex[thick]))
            state.tex = 0.5*(thistex+state.tex)
        state.source_function = self.rate_equations.source_function(state.tex)
        state.taul = self.rate_equations.optical_depth(new_pop)
        if state.niter >= self.miniter:
            if state.nthick == 0 or tsum/state.nthick < self.ccrit:
                state.converged = True
        state.xpop = self.underrelaxation*state.xpop\
                              + (1-self.underrelaxation)*state.xpopold
        return tsum

    def iterate(self,state):
        '''Performs one iteration: builds and solves the rate equations, then
        updates the state'''
        rhs,yrate = self.rate_equations.build(state=state)
        new_pop = self.rate_equations.solve(rhs=rhs,yrate=yrate)
        return self.update_state(state=state,new_pop=new_pop)

    def solve(self,initial_state=None):
        '''Iterates the level populations until convergence.

        Args:
            initial_state (SolverState): If given, the iteration starts from
                this state instead of optically thin conditions, with the
                iteration counter restarting at 1. The state is not modified.
                Defaults to None.

        Returns:
            SolverState: the final state. If the iteration did not converge,
            the state is marked as exhausted and a ConvergenceWarning is issued.
        '''
        if initial_state is None:
            state = self.new_state()
            first_iter = 0
        else:
            state = initial_state.copy()
            state.converged = False
            state.exhausted = False
            state.warnings = []
            first_iter = 1
        start = time.time()
        out_of_time = False
        for niter in range(first_iter,self.maxiter+1):
            state.niter = niter
            tsum = self.iterate(state=state)
            if self.verbose and niter%10 == 0:
                print(f'iteration {niter}: thick lines = {state.nthick},'
                      +f' Tex change = {tsum:.3g}')
            if state.converged:
                break
            if self.max_time is not None and time.time()-start > self.max_time:
                out_of_time = True
                break
        if state.converged:
            if self.verbose:
                print(f'converged in {state.niter} iterations')
        else:
            state.exhausted = True
            message = f'calculation did not converge in {state.niter} iterations'
            if out_of_time:
                message += f' (time budget of {self.max_time} s exceeded)'
            state.record_warning(message,category=ConvergenceWarning)
        self.state = state
        return state

    def line_intensities(self):
        '''Line intensities of the last solution, see
        pyjadex.flux.line_intensities'''
        if self.state is None:
            raise RuntimeError('no solution available; call solve first')
        return flux.line_intensities(rundef=self.rundef,
                                     background_field=self.background,
                                     state=self.state)

    def print_results(self):
        '''Prints the results of the last solution for the lines within the
        frequency window'''
        results = self.line_intensities()
        print('\n')
        print(f'{self.rundef}, status: {self.state.status} after'
              +f' {self.state.niter} iterations')
        print('  line      E_up [K]     freq [GHz]    T_ex [K]        tau'\
              +'       T_R [K]      pop_up     pop_low   flux [K km/s]'\
              +'  flux [erg/cm2/s]')
        for i in range(results['index'].size):
            output = f'{results["name"][i]:>6s} {results["eup"][i]:>12.1f} '\
                     +f'{results["spfreq"][i]:>14.4f} {results["tex"][i]:>10.3f} '\
                     +f'{results["tau"][i]:>10.3e} {results["T_R"][i]:>12.3e} '\
                     +f'{results["pop_up"][i]:>11.3e} {results["pop_low"][i]:>11.3e} '\
                     +f'{results["flux_K_km_s"][i]:>15.4e} '\
                     +f'{results["flux_erg_cm2_s"][i]:>17.4e}'
            print(output)
        print('\n')


def model_grid(molecule,collider,densities,tkin_values,cdmol_values,
               requested_output,solver_kwargs=None,**rundef_kwargs):
    r'''Iterator over a grid of models. Models are calculated for all
    combinations of the input parameters densities, tkin_values and cdmol_values.

    Args:
        molecule (pyjadex.molecule.Molecule): the molecule
        collider (:obj:`str`): name of the collision partner
        densities (:obj:`list` or numpy.ndarray): densities of the collision
            partner in [cm\ :sup:`-3`]
        tkin_values (:obj:`list` or numpy.ndarray): kinetic temperatures in [K]
        cdmol_values (:obj:`list` or numpy.ndarray): column densities in
            [cm\ :sup:`-2`]
        requested_output (:obj:`list`): Possible entries are 'xpop', 'tex',
            'taul', 'status', 'niter' and 'line_intensities'
        solver_kwargs (:obj:`dict`): keyword arguments for Solver
        **rundef_kwargs: further keyword arguments for RunDef (deltav is
            required)

    Returns:
        dict: dictionary with fields 'tkin', 'density' and 'cdmol' identifying
        the model, as well as the requested output. If the model could not be
        calculated, the output fields are None.
    '''
    if solver_kwargs is None:
        solver_kwargs = {}
    allowed_outputs = ('xpop','tex','taul','status','niter','line_intensities')
    for request in requested_output:
        assert request in allowed_outputs,f'requested output "{request}" is invalid'
    for tkin in tkin_values:
        for density in densities:
            for cdmol in cdmol_values:
                output = {'tkin':tkin,'density':density,'cdmol':cdmol}
                try:
                    rundef = RunDef(mol=molecule,collider=collider,density=density,
                                    tkin=tkin,cdmol=cdmol,**rundef_kwargs)
                    solver = Solver(rundef=rundef,**solver_kwargs)
                    state = solver.solve()
                except (ValueError,np.linalg.LinAlgError) as error:
                    warnings.warn('error during calculation of model with'
                                  +f' parameters {output}: {error}')
                    for out in requested_output:
                        output[out] = None
                    yield output
                    continue
                for out in requested_output:
                    if out == 'line_intensities':
                        output[out] = solver.line_intensities()
                    else:
                        output[out] = getattr(state,out)
                yield output
