# gmpest/config.py
import os
import logging

# Read version from VERSION file
_version_file = os.path.join(os.path.dirname(__file__), "..", "VERSION")
try:
    with open(os.path.abspath(_version_file), "r") as f:
        __version__ = f.read().strip()
except FileNotFoundError:
    __version__ = "0.0.0"


def _level_from_env(default=logging.WARNING):
    env = os.environ.get("GMPEST_LOG_LEVEL")
    if env is None:
        return default
    level = logging.getLevelName(env.upper())
    return level if isinstance(level, int) else default


class _GMPEstConfig:
    def __init__(self):
        self.version = __version__
        self.dtype = float
        self.seed = 1234
        # scoring defaults, overridable per call
        self.max_halvings = 30
        self.max_iterations = 200
        # logger lives in config
        self.logger = logging.getLogger("gmpest")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(_level_from_env())

    def __str__(self):
        return (
            f"GMPEstConfig("
            f"version={self.version}, "
            f"dtype={self.dtype}, "
            f"seed={self.seed}, "
            f"max_halvings={self.max_halvings}, "
            f"max_iterations={self.max_iterations})"
        )

    def __repr__(self):
        return (
            f"<GMPEstConfig "
            f"version={self.version!r}, "
            f"dtype={self.dtype!r}, "
            f"seed={self.seed!r}, "
            f"max_halvings={self.max_halvings!r}, "
            f"max_iterations={self.max_iterations!r}>"
        )

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"Unknown configuration key {k!r}")
            setattr(self, k, v)
        return self


_config = _GMPEstConfig()


def get_config():
    return _config


def get_logger():
    return _config.logger


def set_log_level(level):
    _config.logger.setLevel(level)
