from pyexachem.scf import hf
from pyexachem.scf import uhf
from pyexachem.scf.hf import RHF
from pyexachem.scf.uhf import UHF
from pyexachem.scf.driver import hartree_fock_driver
