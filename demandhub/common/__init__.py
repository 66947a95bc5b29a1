# Common utilities
from demandhub.common.logging_utils import setup_logger as setup_logger
from demandhub.common.mixins import Configurable as Configurable

__all__ = ["Configurable", "setup_logger"]
