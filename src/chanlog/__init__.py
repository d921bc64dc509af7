"""chanlog — multi-channel diagnostic log.

Routes messages to fixed error, warning, screen, note and file channels,
each with its own log file and standard stream, and shows the error log
at shutdown when anything went wrong.
"""

from chanlog._version import __version__, __app_name__

__all__ = ["__version__", "__app_name__"]
