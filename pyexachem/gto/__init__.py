from pyexachem.gto.mole import build_mol
