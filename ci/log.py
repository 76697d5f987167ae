from copy import copy
import logging
import sys

RESET = '\033[0m'

# bold + foreground colour
level_colours = {
    logging.DEBUG: '\033[1m\033[34m',
    logging.INFO: '\033[1m\033[32m',
    logging.WARNING: '\033[1m\033[33m',
    logging.ERROR: '\033[1m\033[31m',
    logging.CRITICAL: '\033[1m\033[31m',
}

default_fmt_string = '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'


class CCFormatter(logging.Formatter):
    '''
    offers `%(levelprefix)s` to format-strings: the record's level-name, coloured if `colour` is
    set (default: if the stream the records go to is a terminal)
    '''
    def __init__(self, fmt: str=default_fmt_string, colour: bool | None=None, stream=None):
        super().__init__(fmt=fmt)
        if colour is None:
            stream = stream or sys.stderr
            colour = hasattr(stream, 'isatty') and stream.isatty()
        self.colour = colour

    def formatMessage(self, record):
        record_copy = copy(record)
        levelprefix = record_copy.levelname
        if self.colour and (colour := level_colours.get(record_copy.levelno)):
            levelprefix = f'{colour}{levelprefix}{RESET}'
        record_copy.__dict__['levelprefix'] = levelprefix
        return super().formatMessage(record_copy)


def configure_default_logging(stdout_level=None, stream=None):
    '''
    replaces all handlers of the root logger w/ a single stream handler (default: stderr), so
    it is safe to call this function more than once
    '''
    if not stdout_level:
        stdout_level = logging.INFO

    for h in list(logging.root.handlers):
        logging.root.removeHandler(h)
        h.close()

    sh = logging.StreamHandler(stream)
    sh.setLevel(stdout_level)
    sh.setFormatter(CCFormatter(stream=sh.stream))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # GitPython logs every spawned git process on debug
    logging.getLogger('git').setLevel(logging.WARNING)


def stdout_level(quiet: bool=False, verbose: bool=False) -> int:
    '''
    maps the global `--quiet` / `--verbose` switches to a log level. `--verbose` wins if both
    are passed.
    '''
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO
