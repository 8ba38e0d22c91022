"""fieldrules — declarative field validation.

Declare rules on a class or a function's parameters, then validate
instances or calls and get back one message per failing field.
"""

from fieldrules.logging_config import configure_logging
from fieldrules.validators import *  # noqa: F401,F403
from fieldrules.validators import __all__ as _validators_all

__version__ = "1.0.0"

__all__ = ["configure_logging", *_validators_all]
