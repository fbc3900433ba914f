import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Every bizhub logger hangs off this one; it owns the only handler.
_root = logging.getLogger("bizhub")
if not _root.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    _root.addHandler(_handler)
    _root.setLevel(logging.DEBUG)
    _root.propagate = False


class Logger:
    """Named child of the ``bizhub`` logger, e.g. ``Logger("edge")``."""

    def __init__(self, name: str = __name__):
        self._logger = _root.getChild(name)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Error level, with the active traceback attached."""
        self._logger.exception(msg, *args, **kwargs)
