# Units
from pint import UnitRegistry
ureg = UnitRegistry(case_sensitive=True)
Q_ = ureg.Quantity

# Informants for command line output
from inform import InformantFactory, warn
succeed = InformantFactory(message_color='green')

from chipview.logging import logger, set_log_level

__version__ = '0.1.0'
