# -*- coding: utf-8 -*-
import os
from pyjadex import flux, molecule, radiative_transfer, run_definition, helpers
import numpy as np
import pytest

here = os.path.dirname(os.path.abspath(__file__))
co = molecule.Molecule.from_LAMDA_file(os.path.join(here,'LAMDA_files','co.dat'))


def solve(cdmol=1e15,density=1e4,deltav=1e5,freq=(0,float('inf'))):
    rundef = run_definition.RunDef(mol=co,collider='para-H2',density=density,
                                   tkin=20,cdmol=cdmol,deltav=deltav,freq=freq)
    solver = radiative_transfer.Solver(rundef=rundef)
    solver.solve()
    return solver


def test_exp_tau_factor():
    tau = np.array((0,1e-8,1e-3,1,50))
    assert np.allclose(flux.exp_tau_factor(tau),1-np.exp(-tau),atol=1e-15,rtol=1e-8)
    assert flux.exp_tau_factor(np.array((1e-8,)))[0] == 1e-8

def test_frequency_window():
    results = solve(freq=(200,400)).line_intensities()
    assert np.all(results['index'] == np.array((1,2)))
    assert list(results['name']) == ['3-2','4-3']
    assert np.all(results['spfreq'] == co.spfreq[1:3])
    empty = solve(freq=(1000,2000)).line_intensities()
    assert empty['index'].size == 0
    assert empty['T_R'].size == 0

def test_radiation_temperature():
    solver = solve(cdmol=1e16)
    results = solver.line_intensities()
    state = solver.state
    xnu = co.xnu
    bnutex = helpers.B_nu(xnu=xnu,T=state.tex)
    backi = solver.background.backi
    toti = backi*np.exp(-state.taul) + bnutex*(1-np.exp(-state.taul))
    expected_T_R = (toti-backi)/(helpers.thc*xnu**2/helpers.fk)
    assert np.allclose(results['T_R'],expected_T_R,atol=0,rtol=1e-8)
    assert np.all(results['tex'] == state.tex)
    assert np.all(results['pop_up'] == state.xpop[co.iupp])
    assert np.all(results['pop_low'] == state.xpop[co.ilow])
    assert np.allclose(results['flux_K_km_s'],1.0645*results['T_R'],atol=0,rtol=1e-12)
    assert np.allclose(results['flux_erg_cm2_s'],
                       helpers.fgauss*helpers.kboltz*1e5*results['T_R']*xnu**2,
                       atol=0,rtol=1e-12)

def test_optically_thick_LTE():
    #line intensity saturates at the black body difference between Tkin and Tbg
    solver = solve(cdmol=1e18,density=1e10)
    results = solver.line_intensities()
    x = helpers.fk*co.xnu
    expected = x*(1/(np.exp(x/20)-1) - 1/(np.exp(x/helpers.T_CMB)-1))
    thick = results['tau'] > 20
    assert np.any(thick)
    assert np.allclose(results['T_R'][thick],expected[thick],atol=0,rtol=1e-3)

def test_optically_thin_scaling():
    #in the thin limit, the integrated intensity is proportional to the column
    #density and independent of the line width
    reference = solve(cdmol=1e10).line_intensities()['flux_K_km_s']
    more_column = solve(cdmol=1e11).line_intensities()['flux_K_km_s']
    broader = solve(cdmol=1e10,deltav=2e5).line_intensities()['flux_K_km_s']
    assert np.allclose(more_column/reference,10,atol=0,rtol=1e-3)
    assert np.allclose(broader,reference,atol=0,rtol=1e-3)

def test_intensity_from_state_source_function():
    solver = solve(cdmol=1e16)
    reference = solver.line_intensities()
    solver.state.source_function = 2*solver.state.source_function
    doubled = solver.line_intensities()
    extra = solver.state.source_function/2*flux.exp_tau_factor(solver.state.taul)
    expected = reference['T_R'] + extra/(helpers.thc*co.xnu**2/helpers.fk)
    assert np.allclose(doubled['T_R'],expected,atol=0,rtol=1e-10)
    assert np.all(doubled['tex'] == reference['tex'])
