from pyexachem.common.input_parser import parse_input_dict
from pyexachem.cc import cd_ccsd_driver

# open-shell CCSD runs on the spin-orbital solver
inp = {
    'geometry': {'coordinates': ['O 0 0 0', 'H 0 0 0.97']},
    'basis': {'basisset': 'cc-pvdz'},
    'common': {'file_prefix': 'oh'},
    'SCF': {'scf_type': 'unrestricted', 'multiplicity': 2},
    'CD': {'diagtol': 1e-6},
    'CC': {'threshold': 1e-7, 'writet': True, 'freeze': {'atomic': True}},
}
options_map, geometry = parse_input_dict(inp)

sys_data, mycc = cd_ccsd_driver(options_map)
print(f'CCSD correlation energy: {mycc.e_corr}')

# a second run picks up the Cholesky vectors and the amplitudes
options_map.ccsd_options.readt = True
sys_data, mycc = cd_ccsd_driver(options_map)
