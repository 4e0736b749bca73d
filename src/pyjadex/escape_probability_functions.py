#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Escape probability as a function of the line optical depth for the
supported geometries.

Each geometry is split into regimes (small, intermediate and large optical
depth) where a numerically stable expression is used. The regime limits are
the ones of RADEX and must not be changed, otherwise results are no longer
comparable.
"""

import numba as nb
import numpy as np
from pyjadex import helpers

#The beta functions are compiled with numba, so they live outside of the
#geometry classes in escape_probability.py

#a non-local escape probability code cannot treat masing lines correctly;
#below this optical depth, the expressions are evaluated at abs(tau) to keep
#the rate matrix well conditioned
min_reliable_tau = -1

@nb.jit(nopython=True,cache=True)
def clip_prob(prob):
    return np.where(prob>1,1.,np.where(prob<0,0.,prob))

@nb.jit(nopython=True,cache=True)
def stabilise_tau(tau_nu):
    return np.where(tau_nu<min_reliable_tau,np.abs(tau_nu),tau_nu)


######## uniform (static) sphere ##########
#Osterbrock (Astrophysics of Gaseous Nebulae and Active Galactic Nuclei),
#appendix 2; taur is the optical depth along the radius

@nb.jit(nopython=True,cache=True)
def beta_Taylor_uniform_sphere(taur):
    return 1 - 0.75*taur + taur**2/2.5 - taur**3/6 + taur**4/17.5

@nb.jit(nopython=True,cache=True)
def beta_analytical_uniform_sphere(taur):
    return 0.75/taur*(1 - 1/(2*taur**2)
                      + (1/taur + 1/(2*taur**2))*np.exp(-2*taur))

@nb.jit(nopython=True,cache=True)
def beta_large_tau_uniform_sphere(taur):
    return 0.75/taur

@nb.jit(nopython=True,cache=True)
def beta_uniform_sphere(tau_nu):
    taur = stabilise_tau(tau_nu)/2
    small = np.abs(taur) < 0.1
    large = np.abs(taur) > 50
    normal = ~(small | large)
    prob = np.empty_like(taur)
    prob[small] = beta_Taylor_uniform_sphere(taur[small])
    prob[large] = beta_large_tau_uniform_sphere(taur[large])
    prob[normal] = beta_analytical_uniform_sphere(taur[normal])
    helpers.assert_all_finite(prob)
    return clip_prob(prob)


######## expanding sphere (LVG, Sobolev) ##########
#de Jong, Boland & Dalgarno (1980, A&A 91, 68), including the factor 2
#applied by RADEX

@nb.jit(nopython=True,cache=True)
def beta_LVG_sphere_less7(taur):
    return 2*(1-np.exp(-2.34*taur))/(4.65*taur)

@nb.jit(nopython=True,cache=True)
def beta_LVG_sphere_gtr7(taur):
    return 2/(4*taur*np.sqrt(np.log(taur/np.sqrt(np.pi))))

@nb.jit(nopython=True,cache=True)
def beta_LVG_sphere(tau_nu):
    taur = stabilise_tau(tau_nu)/2
    thin = np.abs(taur) < 0.01
    less7 = ~thin & (np.abs(taur) < 7)
    gtr7 = ~(thin | less7)
    prob = np.empty_like(taur)
    prob[thin] = 1.
    prob[less7] = beta_LVG_sphere_less7(taur[less7])
    prob[gtr7] = beta_LVG_sphere_gtr7(taur[gtr7])
    helpers.assert_all_finite(prob)
    return clip_prob(prob)


######## slab (shocks) ##########
#de Jong, Dalgarno & Chu (1975, ApJ 199, 69)

@nb.jit(nopython=True,cache=True)
def beta_Taylor_slab(tau_nu):
    return 1 - 1.5*(tau_nu - tau_nu**2)

@nb.jit(nopython=True,cache=True)
def beta_analytical_slab(tau_nu):
    return (1-np.exp(-3*tau_nu))/(3*tau_nu)

@nb.jit(nopython=True,cache=True)
def beta_large_tau_slab(tau_nu):
    return 1/(3*tau_nu)

@nb.jit(nopython=True,cache=True)
def beta_slab(tau_nu):
    tau_nu = stabilise_tau(tau_nu)
    small = np.abs(3*tau_nu) < 0.1
    large = np.abs(3*tau_nu) > 50
    normal = ~(small | large)
    prob = np.empty_like(tau_nu)
    prob[small] = beta_Taylor_slab(tau_nu[small])
    prob[large] = beta_large_tau_slab(tau_nu[large])
    prob[normal] = beta_analytical_slab(tau_nu[normal])
    helpers.assert_all_finite(prob)
    return clip_prob(prob)
