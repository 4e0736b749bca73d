# -*- coding: utf-8 -*-
"""
Reader for molecular data files in the format of the Leiden Atomic and
Molecular Database (LAMDA, https://home.strw.leidenuniv.nl/~moldata/).
"""
from pyjadex import atomic_transition
import numpy as np

#identifiers used in the LAMDA database files:
LAMDA_coll_ID = {'1':'H2','2':'para-H2','3':'ortho-H2','4':'e',
                 '5':'H','6':'He','7':'H+'}


def is_comment(line):
    return line.lstrip().startswith('!')


class DataLines():

    '''Iterator over the non-comment lines of a data file, keeping track of
    the line numbers for error messages'''

    def __init__(self,datafile):
        self.lines = ((i+1,line.strip()) for i,line in enumerate(datafile)
                      if line.strip() != '' and not is_comment(line))
        self.line_number = 0

    def next_line(self,what):
        try:
            self.line_number,line = next(self.lines)
        except StopIteration:
            raise ValueError(f'unexpected end of file while reading {what}') from None
        return line

    def next_values(self,what,n_min=1):
        entries = self.next_line(what).split()
        if len(entries) < n_min:
            raise ValueError(f'line {self.line_number}: expected at least {n_min}'
                             +f' entries for {what}')
        return entries

    def next_int(self,what):
        return self.convert(self.next_values(what)[0],int,what)

    def convert(self,string,func,what):
        try:
            return func(string)
        except ValueError:
            raise ValueError(f'line {self.line_number}: cannot read {what}'
                             +f' from "{string}"') from None


def get_level(levels,number,data_lines):
    #level numbering in the file starts at 1
    if not 1 <= number <= len(levels):
        raise ValueError(f'line {data_lines.line_number}: level {number} does'
                         +' not exist')
    return levels[number-1]


def read(datafilepath):
    '''
    Read a LAMDA data file.

    Parameters
    ----------
    datafilepath : str
        path to the file

    Returns
    -------
    dict
        Dictionary with the following keys:

        - 'name': name of the molecule

        - 'mass': molecular weight

        - 'levels': list of levels (instances of the Level class)

        - 'radiative transitions': list of radiative transitions (instances of
          the RadiativeTransition class)

        - 'collisional transitions': dict, containing lists of instances of the
          CollisionalTransition class for each collision partner appearing in
          the file

        The elements of these lists are in the order they appear in the file

    Raises
    ------
    ValueError
        If the file does not follow the LAMDA format or refers to
        inconsistent level numbers.
    '''
    with open(datafilepath,'r') as datafile:
        data_lines = DataLines(datafile)
        name = data_lines.next_line('molecule name')
        mass = data_lines.convert(data_lines.next_values('molecular weight')[0],
                                  float,'molecular weight')
        n_levels = data_lines.next_int('number of levels')
        levels = []
        for i in range(n_levels):
            entries = data_lines.next_values('level',n_min=3)
            number = data_lines.convert(entries[0],int,'level number')
            if number != i+1:
                raise ValueError(f'line {data_lines.line_number}: level numeration'
                                 +' not consistent')
            label = entries[3] if len(entries) > 3 else ''
            levels.append(atomic_transition.Level(
                             E=data_lines.convert(entries[1],float,'level energy'),
                             g=data_lines.convert(entries[2],float,'statistical weight'),
                             index=i,label=label))
        n_rad_transitions = data_lines.next_int('number of radiative transitions')
        rad_transitions = []
        for i in range(n_rad_transitions):
            entries = data_lines.next_values('radiative transition',n_min=4)
            up = get_level(levels,data_lines.convert(entries[1],int,'upper level'),
                           data_lines)
            low = get_level(levels,data_lines.convert(entries[2],int,'lower level'),
                            data_lines)
            kwargs = {'up':up,'low':low,
                      'A21':data_lines.convert(entries[3],float,'Einstein A')}
            if len(entries) > 4:
                kwargs['spfreq'] = data_lines.convert(entries[4],float,'frequency')
            if len(entries) > 5:
                kwargs['Eup'] = data_lines.convert(entries[5],float,'upper energy')
            rad_transitions.append(atomic_transition.RadiativeTransition(**kwargs))
        n_partners = data_lines.next_int('number of collision partners')
        coll_transitions = {}
        for i in range(n_partners):
            partner_line = data_lines.next_line('collision partner')
            try:
                coll_ID = LAMDA_coll_ID[partner_line[0]]
            except KeyError:
                raise ValueError(f'line {data_lines.line_number}: unknown collision'
                                 +f' partner "{partner_line}"') from None
            n_coll_transitions = data_lines.next_int('number of collisional transitions')
            n_temperatures = data_lines.next_int('number of collision temperatures')
            temperatures = np.array([data_lines.convert(t,float,'temperature') for t in
                                     data_lines.next_values('temperatures',
                                                            n_min=n_temperatures)])
            if temperatures.size != n_temperatures:
                raise ValueError(f'line {data_lines.line_number}: expected'
                                 +f' {n_temperatures} temperatures')
            coll_transitions[coll_ID] = []
            for j in range(n_coll_transitions):
                entries = data_lines.next_values('collisional transition',
                                                 n_min=3+n_temperatures)
                up = get_level(levels,data_lines.convert(entries[1],int,'upper level'),
                               data_lines)
                low = get_level(levels,data_lines.convert(entries[2],int,'lower level'),
                                data_lines)
                K21_data = np.array([data_lines.convert(K,float,'rate coefficient')
                                     for K in entries[3:3+n_temperatures]])
                coll_transitions[coll_ID].append(
                      atomic_transition.CollisionalTransition(
                                 up=up,low=low,K21_data=K21_data,
                                 Tkin_data=temperatures))
    return {'name':name,'mass':mass,'levels':levels,
            'radiative transitions':rad_transitions,
            'collisional transitions':coll_transitions}
