"""
Run Package

Modules:
    config: Config class (INI file parser with defaults)
    trial:  Trial abstract driver

Exported Classes:
    Config: Configuration parameters
    Trial:  Abstract base class for one evolutionary run
"""

from neatdag.run.config import Config
from neatdag.run.trial  import Trial

__all__ = ['Config', 'Trial']
