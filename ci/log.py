import copy
import logging
import sys

RESET = '\033[0m'

# bold, plus foreground-colour
level_colours = {
    logging.DEBUG: '\033[1;34m',
    logging.INFO: '\033[1;32m',
    logging.WARNING: '\033[1;33m',
    logging.ERROR: '\033[1;31m',
}


class CCFormatter(logging.Formatter):
    '''
    exposes the (optionally coloured) level-name as `levelprefix`. If `colored` is None, colours
    are used if stderr is a tty.
    '''
    def __init__(self, *args, colored: bool | None=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.colored = colored

    def formatMessage(self, record):
        record = copy.copy(record)

        colored = self.colored
        if colored is None:
            colored = sys.stderr.isatty()

        if colored and (colour := level_colours.get(record.levelno)):
            record.levelprefix = f'{colour}{record.levelname}{RESET}'
        else:
            record.levelprefix = record.levelname

        return super().formatMessage(record)


def default_fmt_string(print_thread_id: bool=False):
    tid = 'TID:%(thread)d ' if print_thread_id else ''
    return f'%(asctime)s [%(levelprefix)s] {tid}%(name)s: %(message)s'


def configure_default_logging(
    stdout_level=logging.INFO,
    print_thread_id=False,
):
    '''
    replaces the root logger's handlers w/ a stream-handler writing to stderr (so rendered
    release-notes on stdout stay pipeable)
    '''
    for handler in tuple(logging.root.handlers):
        logging.root.removeHandler(handler)
        handler.close()

    sh = logging.StreamHandler()
    sh.setLevel(stdout_level)
    sh.setFormatter(CCFormatter(fmt=default_fmt_string(print_thread_id=print_thread_id)))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # both too verbose ...
    logging.getLogger('github3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
