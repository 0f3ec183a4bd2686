import os
import shutil
import inspect


# ANSI colors of terminal output
def _red(x) -> str:        return f'\033[0;31;40m{x}\033[0m'
def _green(x) -> str:      return f'\033[0;32;40m{x}\033[0m'
def _yellow(x) -> str:     return f'\033[0;33;40m{x}\033[0m'
def _blue(x) -> str:       return f'\033[0;34;40m{x}\033[0m'


def _fill_terminal(x: str, char: str, align: str = 'center') -> str:
    """ pad `x` with `char` to the width of terminal. align: 'center' or 'left'
    """
    n = shutil.get_terminal_size((80, 24)).columns - len(x)
    if n < 2:
        return x
    if align == 'left':
        return x + char * n
    return char * (n // 2) + x + char * (n - n // 2)


def _posix(path: str) -> str:
    return path.replace('\\', '/')


def caller_filename(level: int = 2) -> str:
    """ file of the nth caller, relative to the working directory when possible
    """
    filename = inspect.stack()[level].filename
    try:
        filename = os.path.relpath(filename)
    except ValueError:
        # another drive on windows
        pass
    return _posix(filename)


def relative_path(path: str, level: int = 1, check_exist: bool = False) -> str:
    """ absolute path of `path` taken relative to the directory of the nth caller

    ex. relative_path('Adder.lo.fir') in a test file gives the fixture beside it
    """
    if not os.path.isabs(path):
        here = os.path.dirname(inspect.stack()[level].filename)
        path = os.path.abspath(os.path.join(here, path))
    if check_exist:
        assert os.path.exists(path), f'path {path} does not exist.'
    return _posix(path)
