# -*- coding: utf-8 -*-
import os
from pyjadex import molecule, atomic_transition, helpers
import numpy as np
import pytest

here = os.path.dirname(os.path.abspath(__file__))
lamda_filepath = os.path.join(here,'LAMDA_files','co.dat')
co = molecule.Molecule.from_LAMDA_file(lamda_filepath)


def two_level_data():
    levels = [atomic_transition.Level(E=0,g=1,index=0),
              atomic_transition.Level(E=3.845,g=3,index=1)]
    rad_transitions = [atomic_transition.RadiativeTransition(
                                 up=levels[1],low=levels[0],A21=1e-5),]
    coll_transitions = [atomic_transition.CollisionalTransition(
                               up=levels[1],low=levels[0],K21_data=[1e-10,2e-10],
                               Tkin_data=[10,100]),]
    return levels,rad_transitions,coll_transitions


def test_sizes():
    assert co.nlev == 5
    assert co.nline == 4
    assert co.npart == 1
    assert co.name == 'CO'
    assert co.mass == 28

def test_level_and_line_arrays():
    assert np.all(co.gstat == np.array((1,3,5,7,9)))
    assert np.all(co.iupp == np.array((1,2,3,4)))
    assert np.all(co.ilow == np.array((0,1,2,3)))
    assert np.all(co.xnu == co.eterm[co.iupp]-co.eterm[co.ilow])
    assert co.spfreq[2] == 345.7959899
    assert co.eup[3] == 55.32
    assert co.aeinst[1] == 6.910e-07
    assert list(co.qnum) == ['0','1','2','3','4']

def test_programmatic_construction():
    levels,rad_transitions,coll_transitions = two_level_data()
    partner = molecule.CollisionPartner(name='H2',transitions=coll_transitions)
    mol = molecule.Molecule(levels=levels,rad_transitions=rad_transitions,
                            coll_partners={'H2':partner})
    assert mol.nlev == 2
    assert mol.xnu[0] == 3.845
    assert partner.ncoll == 1
    assert partner.ntemp == 2

def test_foreign_level_is_rejected():
    levels,rad_transitions,coll_transitions = two_level_data()
    foreign_level = atomic_transition.Level(E=10,g=5,index=1)
    foreign_transition = atomic_transition.RadiativeTransition(
                                  up=foreign_level,low=levels[0],A21=1e-5)
    partner = molecule.CollisionPartner(name='H2',transitions=coll_transitions)
    with pytest.raises(ValueError):
        molecule.Molecule(levels=levels,rad_transitions=[foreign_transition,],
                          coll_partners={'H2':partner})
    out_of_range = atomic_transition.Level(E=10,g=5,index=2)
    with pytest.raises(ValueError):
        molecule.Molecule(
              levels=levels,coll_partners={'H2':partner},
              rad_transitions=[atomic_transition.RadiativeTransition(
                                       up=out_of_range,low=levels[0],A21=1e-5),])

def test_misnumbered_levels_are_rejected():
    levels,rad_transitions,coll_transitions = two_level_data()
    partner = molecule.CollisionPartner(name='H2',transitions=coll_transitions)
    with pytest.raises(ValueError):
        molecule.Molecule(levels=levels[::-1],rad_transitions=rad_transitions,
                          coll_partners={'H2':partner})

def test_inconsistent_temperature_grid():
    levels,rad_transitions,coll_transitions = two_level_data()
    other = atomic_transition.CollisionalTransition(
                   up=levels[1],low=levels[0],K21_data=[1e-10,2e-10],
                   Tkin_data=[10,200])
    with pytest.raises(ValueError):
        molecule.CollisionPartner(name='H2',transitions=coll_transitions+[other,])
    with pytest.raises(ValueError):
        molecule.CollisionPartner(name='H2',transitions=[])

def test_LTE_level_pop():
    for T in (5,30,300):
        pop = co.LTE_level_pop(T)
        assert np.sum(pop) == pytest.approx(1,rel=1e-12)
        expected = co.gstat*np.exp(-helpers.fk*co.eterm/T)/co.Z(T)
        assert np.allclose(pop,expected,atol=0,rtol=1e-12)

def test_get_rad_transition_number():
    assert co.get_rad_transition_number('2-1') == 0
    assert co.get_rad_transition_number('5-4') == 3
    with pytest.raises(ValueError):
        co.get_rad_transition_number('3-1')

def test_nearest_temperature():
    partner = co.coll_partners['para-H2']
    assert partner.temperature_index(3) == 0
    assert partner.temperature_index(14) == 0
    assert partner.temperature_index(22) == 1
    assert partner.temperature_index(500) == 2
    K12,K21 = partner.coeffs(Tkin=22)
    assert K21[0] == 3.29e-11

def test_collision_rates():
    density = 1e4
    Tkin = 20
    crate = co.collision_rates(collider='para-H2',density=density,Tkin=Tkin)
    assert crate.shape == (5,5)
    assert np.all(np.diag(crate) == 0)
    #downward rate 2->1 (indices 1->0)
    assert crate[1,0] == pytest.approx(3.29e-11*density,rel=1e-12)
    #detailed balance: LTE populations are stationary under collisions alone
    pop = co.LTE_level_pop(Tkin)
    for i in range(co.nlev):
        for j in range(co.nlev):
            assert pop[i]*crate[i,j] == pytest.approx(pop[j]*crate[j,i],rel=1e-10)
    net_flow = crate.T@pop - np.sum(crate,axis=1)*pop
    assert np.allclose(net_flow,0,atol=1e-12*density*1e-11)
