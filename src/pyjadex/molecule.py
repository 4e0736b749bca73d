# -*- coding: utf-8 -*-
"""
Atomic and molecular data needed to solve the statistical equilibrium.
"""
import numpy as np
from pyjadex import LAMDA_file,atomic_transition,helpers


class CollisionPartner():

    '''Represents the collisional rate coefficients of a molecule with one
    collision partner

    Attributes:
        name (:obj:`str`): name of the collision partner
        transitions (list of pyjadex.atomic_transition.CollisionalTransition):
            the collisional transitions, in the order of the data file
        Tkin_data (numpy.ndarray): temperatures at which the rate coefficients
            are tabulated, in [K]
        K21_matrix (numpy.ndarray): downward rate coefficients in [cm3/s],
            shape (number of transitions, number of temperatures)
    '''

    def __init__(self,name,transitions):
        if len(transitions) == 0:
            raise ValueError(f'collision partner {name}: no collisional transitions')
        self.name = name
        self.transitions = transitions
        self.Tkin_data = transitions[0].Tkin_data
        for trans in transitions:
            if not np.array_equal(trans.Tkin_data,self.Tkin_data):
                raise ValueError(f'collision partner {name}: inconsistent'
                                 +' temperature grid')
        self.K21_matrix = np.array([trans.K21_data for trans in transitions])
        self.nup = np.array([trans.up.index for trans in transitions])
        self.nlow = np.array([trans.low.index for trans in transitions])
        self.gup = np.array([trans.up.g for trans in transitions])
        self.glow = np.array([trans.low.g for trans in transitions])
        self.xnu = np.array([trans.xnu for trans in transitions])

    @property
    def ncoll(self):
        return len(self.transitions)

    @property
    def ntemp(self):
        return self.Tkin_data.size

    def temperature_index(self,Tkin):
        '''Index of the tabulated temperature closest to Tkin. Rate coefficients
        are not interpolated in temperature.'''
        return int(np.argmin(np.abs(self.Tkin_data-Tkin)))

    def coeffs(self,Tkin):
        r'''Computes the collisional rate coefficients at kinetic temperature Tkin.
        The downward coefficients are taken at the closest tabulated temperature,
        the upward coefficients follow from detailed balance at Tkin.

        Returns:
            tuple: K12 and K21 in [cm\ :sup:`3`/s], one value per transition
        '''
        K21 = self.K21_matrix[:,self.temperature_index(Tkin)]
        K12 = atomic_transition.compute_K12(K21=K21,g_up=self.gup,g_low=self.glow,
                                            xnu=self.xnu,Tkin=Tkin)
        return K12,K21

    def __repr__(self):
        return f'CollisionPartner(name={self.name}, ncoll={self.ncoll},'\
               +f' ntemp={self.ntemp})'


class Molecule():

    '''Represents an atom or molecule

    Attributes:
        name (:obj:`str`): name of the molecule
        mass (:obj:`float`): molecular weight in [amu]
        levels (list of pyjadex.atomic_transition.Level): the energy levels
        rad_transitions (list of pyjadex.atomic_transition.RadiativeTransition):
            the radiative transitions
        coll_partners (dict): the collision partners, as instances of
            CollisionPartner, with the partner names as keys
        eterm, gstat, qnum (numpy.ndarray): energy [cm-1], statistical weight
            and label of each level
        iupp, ilow, aeinst, spfreq, eup, xnu (numpy.ndarray): upper and lower
            level index, Einstein A [s-1], frequency [GHz], upper level
            energy [K] and energy difference [cm-1] of each radiative transition
    '''

    def __init__(self,levels,rad_transitions,coll_partners,name='',mass=None):
        self.name = name
        self.mass = mass
        self.levels = levels
        self.rad_transitions = rad_transitions
        self.coll_partners = coll_partners
        self.check_data()
        self.eterm = np.array([level.E for level in levels],dtype=float)
        self.gstat = np.array([level.g for level in levels],dtype=float)
        self.qnum = np.array([level.label for level in levels])
        self.iupp = np.array([trans.up.index for trans in rad_transitions],dtype=np.int64)
        self.ilow = np.array([trans.low.index for trans in rad_transitions],dtype=np.int64)
        self.aeinst = np.array([trans.A21 for trans in rad_transitions],dtype=float)
        self.spfreq = np.array([trans.spfreq for trans in rad_transitions],dtype=float)
        self.eup = np.array([trans.Eup for trans in rad_transitions],dtype=float)
        self.xnu = np.array([trans.xnu for trans in rad_transitions],dtype=float)

    @classmethod
    def from_LAMDA_file(cls,datafilepath):
        '''Constructs a new instance of the Molecule class from a LAMDA data file

        Args:
            datafilepath (:obj:`str`): The filepath to the LAMDA file.
        '''
        data = LAMDA_file.read(datafilepath=datafilepath)
        coll_partners = {name:CollisionPartner(name=name,transitions=transitions)
                         for name,transitions in
                         data['collisional transitions'].items()}
        return cls(levels=data['levels'],
                   rad_transitions=data['radiative transitions'],
                   coll_partners=coll_partners,name=data['name'],
                   mass=data['mass'])

    def check_data(self):
        for i,level in enumerate(self.levels):
            if level.index != i:
                raise ValueError(f'level at position {i} has index {level.index}')
        transitions = list(self.rad_transitions)
        for partner in self.coll_partners.values():
            transitions += partner.transitions
        for trans in transitions:
            for level in (trans.up,trans.low):
                if not 0 <= level.index < self.nlev\
                                    or self.levels[level.index] is not level:
                    raise ValueError(f'transition {trans.name} refers to a level'
                                     +' that is not part of the molecule')

    @property
    def nlev(self):
        return len(self.levels)

    @property
    def nline(self):
        return len(self.rad_transitions)

    @property
    def npart(self):
        return len(self.coll_partners)

    def Z(self,T):
        '''Partition function at temperature T [K]'''
        return np.sum(self.gstat*np.exp(-helpers.fk*self.eterm/T))

    def LTE_level_pop(self,T):
        '''Computes the fractional level populations in LTE at temperature T [K]'''
        Z = self.Z(T)
        return np.array([level.LTE_level_pop(Z=Z,T=T) for level in self.levels])

    def get_rad_transition_number(self,transition_name):
        '''Returns the transition number for a given transition name'''
        candidate_numbers = [i for i,line in enumerate(self.rad_transitions) if
                             line.name==transition_name]
        if len(candidate_numbers) != 1:
            raise ValueError(f'no unique transition named {transition_name}')
        return candidate_numbers[0]

    def collision_rates(self,collider,density,Tkin):
        r'''Collisional transition rates with a single collision partner.

        Args:
            collider (:obj:`str`): name of the collision partner
            density (:obj:`float`): number density of the collision partner
                in [cm\ :sup:`-3`]
            Tkin (:obj:`float`): kinetic temperature in [K]

        Returns:
            numpy.ndarray: matrix crate, where crate[i,j] is the rate [s-1]
            of transitions from level i to level j
        '''
        partner = self.coll_partners[collider]
        K12,K21 = partner.coeffs(Tkin=Tkin)
        crate = np.zeros((self.nlev,self.nlev))
        np.add.at(crate,(partner.nup,partner.nlow),K21*density)
        np.add.at(crate,(partner.nlow,partner.nup),K12*density)
        return crate

    def __repr__(self):
        return f'Molecule(name={self.name}, nlev={self.nlev}, nline={self.nline},'\
               +f' colliders={",".join(self.coll_partners)})'
