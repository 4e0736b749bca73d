# -*- coding: utf-8 -*-
"""
Definition of the physical conditions of a single model calculation.
"""
import numbers
from pyjadex import escape_probability,helpers

#short names of the collision partners accepted in addition to the LAMDA names
collider_aliases = {'h2':'H2','p-h2':'para-H2','o-h2':'ortho-H2','e':'e',
                    'h':'H','he':'He','h+':'H+'}


class RunDef():

    r'''Describes the physical conditions of one model calculation. The
    attributes are not meant to be modified after construction; define a new
    instance for new conditions.

    Attributes:
        mol (pyjadex.molecule.Molecule): the emitting molecule
        collider (:obj:`str`): name of the collision partner
        density (:obj:`float`): number density of the collision partner
            in [cm\ :sup:`-3`]
        totdens (:obj:`float`): total number density in [cm\ :sup:`-3`]
        freq (:obj:`tuple`): lower and upper limit of the frequency window
            in [GHz]
        tkin (:obj:`float`): kinetic temperature in [K]
        tbg (:obj:`float`): temperature of the background radiation in [K]
        cdmol (:obj:`float`): column density of the molecule in [cm\ :sup:`-2`]
        deltav (:obj:`float`): FWHM of the lines in [cm/s]
        geometry (:obj:`str`): "sphere", "lvg" or "slab"
        escape (object): the geometry instance providing the escape probability
    '''

    def __init__(self,mol,collider,density,tkin,cdmol,deltav,geometry='sphere',
                 tbg=helpers.T_CMB,totdens=None,freq=(0,float('inf'))):
        self.mol = mol
        self.collider = self.resolve_collider(collider)
        self.escape = escape_probability.get_geometry(geometry)
        self.geometry = geometry
        for name,value in {'density':density,'tkin':tkin,'cdmol':cdmol,
                           'deltav':deltav}.items():
            self.check_positive(name=name,value=value)
        self.density = density
        self.totdens = density if totdens is None else totdens
        self.check_positive(name='totdens',value=self.totdens)
        self.tkin = tkin
        self.cdmol = cdmol
        self.deltav = deltav
        if not isinstance(tbg,numbers.Number) or tbg < 0:
            raise ValueError('tbg must be a non-negative number')
        self.tbg = tbg
        fmin,fmax = freq
        if fmin > fmax:
            raise ValueError('lower limit of the frequency window is larger than'
                             +' the upper limit')
        self.freq = (fmin,fmax)

    @staticmethod
    def check_positive(name,value):
        if not isinstance(value,numbers.Number) or not value > 0:
            raise ValueError(f'{name} must be a positive number')

    def resolve_collider(self,collider):
        if collider in self.mol.coll_partners:
            return collider
        name = collider_aliases.get(str(collider).lower())
        if name is None or name not in self.mol.coll_partners:
            raise ValueError(f'no data for collider "{collider}" available;'
                             +f' available: {", ".join(self.mol.coll_partners)}')
        return name

    @property
    def cddv(self):
        '''column density divided by the line width'''
        return self.cdmol/self.deltav

    def __repr__(self):
        return f'RunDef(mol={self.mol.name}, collider={self.collider},'\
               +f' density={self.density:g}, tkin={self.tkin:g},'\
               +f' cdmol={self.cdmol:g}, deltav={self.deltav:g},'\
               +f' geometry={self.geometry})'
