from pyexachem.lib import logger
from pyexachem.lib import chkfile
