#Example of running a grid of models with pyjadex

from pyjadex import molecule,radiative_transfer
import numpy as np

co = molecule.Molecule.from_LAMDA_file('./co.dat')
densities = np.logspace(2,6,5) #[cm-3]
tkin_values = [10,20,50] #[K]
cdmol_values = [1e14,1e16] #[cm-2]

grid = radiative_transfer.model_grid(
            molecule=co,collider='para-H2',densities=densities,
            tkin_values=tkin_values,cdmol_values=cdmol_values,
            requested_output=['tex','status','line_intensities'],
            deltav=1e5,geometry='lvg')
for model in grid:
    if model['tex'] is None:
        continue
    T_R = model['line_intensities']['T_R'][0]
    print(f"Tkin={model['tkin']} K, n={model['density']:.1e} cm-3,"
          +f" N={model['cdmol']:.1e} cm-2: Tex(1-0)={model['tex'][0]:.2f} K,"
          +f" T_R(1-0)={T_R:.3f} K ({model['status']})")
