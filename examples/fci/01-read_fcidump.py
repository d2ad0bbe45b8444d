import sys
from pyexachem.fci import read_fcidump, run_fci_solver
from pyexachem.common.options import FCIOptions

# e.g. 00-fcidump.sto-3g_files/restricted/fci/00-fcidump.sto-3g.fcidump
# written by `pyexachem 00-fcidump.json`
fcidump_file = sys.argv[1]
data = read_fcidump(fcidump_file)
print(f'NORB = {data["NORB"]}  NELEC = {data["NELEC"]}  ECORE = {data["ECORE"]}')

e = run_fci_solver(fcidump_file, FCIOptions(nroots=3))
print(f'FCI energies: {e}')
