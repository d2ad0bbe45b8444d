from pyexachem.mp.cd_mp2 import cd_mp2_driver
