#Minimum example of the usage of pyjadex

from pyjadex import molecule,run_definition,radiative_transfer,helpers

data_filepath = './co.dat' #relative or absolute path to the LAMDA datafile
co = molecule.Molecule.from_LAMDA_file(data_filepath)

rundef = run_definition.RunDef(
               mol=co,
               collider='p-h2', #short name or LAMDA name of the collision partner
               density=1e4, #density of the collision partner in [cm-3]
               tkin=30, #kinetic temperature in [K]
               cdmol=1e16, #column density in [cm-2]
               deltav=1e5, #FWHM of the lines in [cm/s], i.e. 1 km/s
               geometry='sphere', #'sphere', 'lvg' or 'slab'
               tbg=helpers.T_CMB, #background temperature in [K]
               freq=(100,500)) #frequency window in [GHz] for the output
solver = radiative_transfer.Solver(rundef=rundef)
state = solver.solve()
solver.print_results() #outputs a table with results for lines in the window

#examples of how to access the results directly:
#excitation temperature of second (as listed in the LAMDA file) transition:
print(f'Tex for second transition: {state.tex[1]:g} K')
#fractional population of 4th level:
print(f'fractional population of 4th level: {state.xpop[3]:g}')
#optical depth of lowest transition at line center:
print(f'optical depth lowest transition: {state.taul[0]:g}')
#integrated intensity of the lowest transition in the frequency window:
intensities = solver.line_intensities()
print(f'{intensities["name"][0]}: {intensities["flux_K_km_s"][0]:g} K km/s')
