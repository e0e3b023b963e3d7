"""Logging helpers."""

import logging
import os
import sys
import warnings


def create_logger(module_name, log_dir=None, level=logging.INFO):
    """
    Set up the logging channel `module_name`.

    Append to ``debug.log`` in `log_dir` (if not ``None``).
    Write to stdout with output level `level`.

    Handlers are only registered the first time a channel is requested,
    so repeated runs do not duplicate messages.

    Parameters
    ----------
    module_name: str
        logger module
    log_dir: str
        directory to write debug.log file into, usually the
        ``base_dir`` of the run
    level: logging level
        which level (and above) to log to stdout.

    Returns
    -------
    logger:
        logger instance
    """
    logger = logging.getLogger(str(module_name))
    first_logger = logger.handlers == []
    if log_dir is not None and first_logger and os.path.isdir(log_dir):
        try:
            handler = logging.FileHandler(os.path.join(log_dir, 'debug.log'))
        except OSError as e:
            warnings.warn('not logging to "%s": %s' % (log_dir, e))
            handler = None
    else:
        handler = None
    if handler is not None:
        msgformat = '%(asctime)s [{}] [%(levelname)s] %(message)s'
        formatter = logging.Formatter(
            msgformat.format(module_name), datefmt='%H:%M:%S')
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    if first_logger:
        logger.setLevel(logging.DEBUG)
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter('[{}] %(message)s'.format(module_name)))
        logger.addHandler(handler)
    return logger
