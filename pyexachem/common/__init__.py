from pyexachem.common.options import OptionsMap
from pyexachem.common.input_parser import parse_input
from pyexachem.common.system_data import SystemData
