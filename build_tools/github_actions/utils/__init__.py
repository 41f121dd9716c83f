"""Utils package shared by the GitHub Actions helper scripts and seL4 build scripts.

Organization:
    - config/: YAML loading and JSON-schema validation
    - logger: console/file logging
    - exceptions: error taxonomy
    - constants: environment names, exit codes, API values

"""

__version__ = "1.0.0"
__all__ = [
    'logger',
    'constants',
    'exceptions',
    'log',
    'set_log_level',
    'Constants',
    'ConfigParser',
    'ConfigValidator',
    'PLATFORMS_SCHEMA',
    'BUILDS_SCHEMA',
]

from .logger import log, set_log_level
from .constants import Constants
from .config import ConfigParser, ConfigValidator, PLATFORMS_SCHEMA, BUILDS_SCHEMA
