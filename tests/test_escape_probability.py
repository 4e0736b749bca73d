# -*- coding: utf-8 -*-
import numpy as np
import pytest
from pyjadex import escape_probability, escape_probability_functions as epf

geometry_names = ('sphere','lvg','slab')
tau_grid = np.concatenate(([0,],np.logspace(-4,4,400)))


def test_clipping():
    prob = np.array((1.0001,1,0.9999,0.5,-0.001,0))
    expected_clipped_prob = np.array((1,1,0.9999,0.5,0,0))
    assert np.all(epf.clip_prob(prob)==expected_clipped_prob)

def test_stabilise_tau():
    tau = np.array((-3.,-1.,-0.5,0,2))
    assert np.all(epf.stabilise_tau(tau)==np.array((3,-1,-0.5,0,2)))

def test_unknown_geometry():
    for geo in ('cube','Sphere',None,''):
        with pytest.raises(ValueError):
            escape_probability.escape_probability(tau=1,geometry=geo)
        with pytest.raises(ValueError):
            escape_probability.get_geometry(geo)

def test_get_geometry():
    for name in geometry_names:
        geo = escape_probability.get_geometry(name)
        assert geo.name == name

def test_optically_thin_limit():
    for geo in geometry_names:
        beta = escape_probability.escape_probability(tau=0,geometry=geo)
        assert beta == pytest.approx(1,abs=1e-10)
        beta = escape_probability.escape_probability(tau=1e-6,geometry=geo)
        assert beta == pytest.approx(1,abs=1e-5)

def test_range():
    tau = np.concatenate((-np.logspace(-3,3,50),tau_grid))
    for geo in geometry_names:
        beta = escape_probability.escape_probability(tau=tau,geometry=geo)
        assert np.all(beta >= 0) and np.all(beta <= 1)
        assert np.all(np.isfinite(beta))

def test_monotonically_decreasing():
    #the regimes join with small discontinuities (at most 1%)
    for geo in geometry_names:
        beta = escape_probability.escape_probability(tau=tau_grid,geometry=geo)
        #a rise of at most 1e-3 relative is allowed: the sphere rises by 2e-4
        #where its intermediate and large tau branches join at taur=50
        assert np.all(np.diff(beta) <= 1e-3*beta[:-1])
        assert beta[-1] < beta[0]

def test_scalar_and_array_input():
    for geo in geometry_names:
        scalar = escape_probability.escape_probability(tau=2.,geometry=geo)
        assert isinstance(scalar,float)
        array = escape_probability.escape_probability(
                      tau=np.array(((2.,2.),(2.,2.))),geometry=geo)
        assert array.shape == (2,2)
        assert np.all(array==scalar)
        from_list = escape_probability.escape_probability(tau=[2,],geometry=geo)
        assert from_list.shape == (1,)

def test_sphere_regimes():
    taur_small = np.array((0.001,0.01,0.05))
    assert np.allclose(epf.beta_uniform_sphere(2*taur_small),
                       epf.beta_Taylor_uniform_sphere(taur_small),atol=0,rtol=1e-14)
    assert np.allclose(epf.beta_Taylor_uniform_sphere(taur_small),
                       epf.beta_analytical_uniform_sphere(taur_small),
                       atol=0,rtol=1e-4)
    taur_large = np.array((60.,1e3))
    assert np.allclose(epf.beta_uniform_sphere(2*taur_large),0.75/taur_large,
                       atol=0,rtol=1e-14)
    taur = np.array((1.,))
    expected = 0.75*(1-0.5+1.5*np.exp(-2))
    assert np.allclose(epf.beta_uniform_sphere(2*taur),expected,atol=0,rtol=1e-12)

def test_LVG_regimes():
    assert np.all(epf.beta_LVG_sphere(np.array((0.,0.001,0.019)))==1)
    taur = np.array((1.,))
    expected = 2*(1-np.exp(-2.34))/4.65
    assert np.allclose(epf.beta_LVG_sphere(2*taur),expected,atol=0,rtol=1e-12)
    taur = np.array((100.,))
    expected = 2/(4*100*np.sqrt(np.log(100/np.sqrt(np.pi))))
    assert np.allclose(epf.beta_LVG_sphere(2*taur),expected,atol=0,rtol=1e-12)

def test_slab_regimes():
    tau_small = np.array((0.001,0.02))
    assert np.allclose(epf.beta_slab(tau_small),1-1.5*(tau_small-tau_small**2),
                       atol=0,rtol=1e-14)
    assert np.allclose(epf.beta_Taylor_slab(tau_small),
                       epf.beta_analytical_slab(tau_small),atol=0,rtol=1e-4)
    tau_large = np.array((20.,1e4))
    assert np.allclose(epf.beta_slab(tau_large),1/(3*tau_large),atol=0,rtol=1e-14)
    tau = np.array((1.,))
    assert np.allclose(epf.beta_slab(tau),(1-np.exp(-3))/3,atol=0,rtol=1e-12)

def test_continuity_at_regime_boundaries():
    #(geometry, tau at boundary, maximum relative jump)
    boundaries = (('sphere',0.2,1e-4),('sphere',100,1e-3),
                  ('slab',0.1/3,1e-4),('slab',50/3,1e-6),
                  ('lvg',0.02,1e-2),('lvg',14,1e-2))
    delta = 1e-9
    for geo,tau,max_jump in boundaries:
        below = escape_probability.escape_probability(tau=tau*(1-delta),geometry=geo)
        above = escape_probability.escape_probability(tau=tau*(1+delta),geometry=geo)
        assert above == pytest.approx(below,rel=max_jump)

def test_large_tau_scaling():
    #beta is proportional to 1/tau for a static geometry
    for geo in ('sphere','slab'):
        beta1 = escape_probability.escape_probability(tau=1e3,geometry=geo)
        beta2 = escape_probability.escape_probability(tau=1e4,geometry=geo)
        assert beta1/beta2 == pytest.approx(10,rel=1e-10)

def test_strongly_negative_tau():
    for geo in geometry_names:
        for tau in (1.5,10,1e3):
            negative = escape_probability.escape_probability(tau=-tau,geometry=geo)
            positive = escape_probability.escape_probability(tau=tau,geometry=geo)
            assert negative == positive

def test_weakly_negative_tau():
    for geo in ('sphere','slab'):
        beta = escape_probability.escape_probability(tau=-0.5,geometry=geo)
        assert beta == 1
