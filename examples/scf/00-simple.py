from pyexachem.common.input_parser import parse_input_dict
from pyexachem.scf import hartree_fock_driver

inp = {
    'geometry': {'coordinates': ['O 0 0 0', 'H 0 -0.757 0.587', 'H 0 0.757 0.587'],
                 'units': 'angstrom'},
    'basis': {'basisset': 'cc-pvdz'},
    'common': {'file_prefix': 'water'},
    'SCF': {'conve': 1e-9, 'diis_hist': 8, 'verbose': 4},
}
options_map, geometry = parse_input_dict(inp)

sys_data, mf = hartree_fock_driver(options_map)
print(f'SCF energy: {mf.e_tot}')
print(f'Orbitals written to {sys_data.files_prefix("scf")}.movecs')
