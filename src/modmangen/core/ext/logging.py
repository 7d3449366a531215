'''
Lazily configured logger, so importing modmangen doesn't mess with the logging setup of the host program

Level can be overridden with the MODMANGEN_LOGS environment variable, e.g. MODMANGEN_LOGS=warning
'''
from __future__ import annotations

import logging
import os
import sys

import logzero  # type: ignore[import-untyped]

LevelIsh = int | str | None

_ENV_VAR = 'MODMANGEN_LOGS'


def mklevel(level: LevelIsh) -> int:
    if level is None:
        return logging.NOTSET
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper())


def _env_level() -> int | None:
    lvl = os.environ.get(_ENV_VAR)
    if lvl is None:
        return None
    return mklevel(lvl)


class StderrHandler(logging.StreamHandler):
    '''
    Resolves sys.stderr on each write, so it keeps working if stderr is swapped (e.g. by click's CliRunner)
    '''

    @property  # type: ignore[override]
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


def setup_logger(logger: logging.Logger, *, level: LevelIsh) -> None:
    env = _env_level()
    logger.setLevel(env if env is not None else mklevel(level))
    # stdout is reserved for the manifest lines
    handler = StderrHandler()
    handler.setFormatter(logzero.LogFormatter(color=sys.stderr.isatty()))
    logger.addHandler(handler)
    logger.propagate = False


class LazyLogger(logging.Logger):
    def __new__(cls, name: str, *, level: LevelIsh = 'info') -> LazyLogger:  # type: ignore[misc]
        logger = logging.getLogger(name)

        # this is called prior to all _log calls so makes sense to do it here?
        def isEnabledFor_lazyinit(*args, logger=logger, orig=logger.isEnabledFor, **kwargs) -> bool:
            if not getattr(logger, '_modmangen_initialized', False):
                setup_logger(logger, level=level)
                logger._modmangen_initialized = True  # type: ignore[attr-defined]
            return orig(*args, **kwargs)

        logger.isEnabledFor = isEnabledFor_lazyinit  # type: ignore[method-assign]
        return logger  # type: ignore[return-value]


def set_level(logger: logging.Logger, level: LevelIsh) -> None:
    '''
    Used by the cli --verbose/--quiet flags. Environment variable still takes precedence
    '''
    if _env_level() is not None:
        return
    logger.isEnabledFor(logging.DEBUG)  # force lazy init
    logger.setLevel(mklevel(level))
