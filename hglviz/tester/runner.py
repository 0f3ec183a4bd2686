from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import re
import sys
import time
import inspect
import traceback

from .utils import _red, _green, _blue, _yellow, _fill_terminal, caller_filename


"""
test cases are plain functions decorated by `tester`; they run at once, at import
time, and receive the result node of the case as `self`

    @tester
    def test_adder(self):
        self.EQ += 1 + 1, 2
        self.AssertIn('add', labels)

results form a tree: file -> case -> nested case, printed by `tester.summary()`
"""


class _Result:
    """ results of one file or one test case
    """

    def __init__(self, name: str = 'top', level: int = 0) -> None:
        self.name = name
        self.level = level
        self.children: Dict[str, _Result] = {}

        self.passed = 0
        self.failures: List[str] = []
        # formatted traceback of an uncaught exception
        self.error: str = ''

        self.t_start = time.time()
        self.t_cost = 0.0

        self.EQ = _EQ(self)

    def child(self, path: List[str]) -> _Result:
        """ get or create the node at `path` below this one
        """
        ret = self
        for key in path:
            if key not in ret.children:
                ret.children[key] = _Result(key, ret.level + 1)
            ret = ret.children[key]
        return ret

    def totals(self) -> Tuple[int, int]:
        """ (passed, failed) of the subtree, an uncaught exception counts as one failure
        """
        passed = self.passed
        failed = len(self.failures) + (1 if self.error else 0)
        for c in self.children.values():
            p, f = c.totals()
            passed += p
            failed += f
        return passed, failed

    #----------------------------------
    # assertions
    #----------------------------------

    def _check(self, ok: bool, reason: str = '') -> bool:
        if ok:
            self.passed += 1
            return True
        index = self.passed + len(self.failures)
        filename, lineno = _caller()
        self.failures.append(f'{filename}:{lineno:<15}assertion {index:<6} failed{reason}')
        return False

    def Assert(self, v: Any, msg: str = '') -> bool:
        return self._check(bool(v), msg)

    def AssertEq(self, a: Any, b: Any, msg: str = '') -> bool:
        # a == b may be anything that has a truth value
        return self._check(bool(a == b), f'   because {a!r} != {b!r}{msg}')

    def AssertIn(self, a: Any, b: Any, msg: str = '') -> bool:
        return self._check(a in b, msg or f'   because {a!r} not in {type(b).__name__}')

    def AssertRaises(self, exc: Type[BaseException], f: Callable, *args, **kwargs) -> Optional[BaseException]:
        """ f(*args, **kwargs) should raise exc, return the exception
        """
        try:
            f(*args, **kwargs)
        except exc as e:
            self._check(True)
            return e
        self._check(False, f'   because {exc.__name__} not raised')
        return None

    #----------------------------------
    # report
    #----------------------------------

    def __str__(self):
        body = '\n'.join(str(c) for c in self.children.values())
        if self.level == 0:
            passed, failed = self.totals()
            t = time.time() - self.t_start
            return f'{body}\n\n{_green(passed)} passed, {_red(failed)} failed, time: {t:.4f}s\n{_fill_terminal("━", "━")}\n'
        if self.level == 1:
            return f'{_fill_terminal("━", "━")}\n{_yellow(self.name)}\n{body}'

        indent = (self.level - 1) * '  '
        passed = _green(f'{self.passed:>8}')
        failed = _red(f'{len(self.failures):>8}')
        lines = [f'{indent}{_blue(self.name):<70}{passed} passed{failed} failed{self.t_cost:>10.4f}s']
        lines.extend(f'{indent}│ {i}' for i in self.failures)
        if self.error:
            lines.extend(indent + i for i in self.error.splitlines())
        if body:
            lines.append(body)
        return '\n'.join(lines)


class _EQ:
    """ self.EQ += a, b
    """

    def __init__(self, node: _Result) -> None:
        self.node = node

    def __iadd__(self, v: Tuple[Any, Any]) -> _EQ:
        a, b = v
        self.node.AssertEq(a, b)
        return self


def _caller() -> Tuple[str, int]:
    """ innermost frame outside of this file
    """
    for frame in inspect.stack()[1:]:
        if frame.filename != __file__:
            return frame.filename, frame.lineno
    return '?', 0


_root = _Result()


class _Tester:
    """ decorator that runs a test case

    enable:
        False to skip the case
    debug:
        True to let exceptions propagate instead of recording them
    """

    # regexp on 'file/case/subcase'
    _filter: Optional[re.Pattern] = None
    # path of the case running now
    _path: List[str] = []

    def __init__(self, enable: bool = True, debug: bool = False) -> None:
        self._enable = enable
        self._debug = debug

    def __call__(self, f: Callable) -> None:
        if not self._enable or not inspect.isfunction(f):
            return
        outermost = not self._path
        if outermost:
            self._path.append(caller_filename())
        self._path.append(f.__name__)
        try:
            if self._filter is None or self._filter.search('/'.join(self._path)):
                self._run(f, _root.child(self._path))
        finally:
            if outermost:
                self._path.clear()
            else:
                self._path.pop()

    def _run(self, f: Callable, node: _Result) -> None:
        node.t_start = time.time()
        if self._debug:
            f(node)
        else:
            try:
                f(node)
            except Exception:
                lines = traceback.format_exception(*sys.exc_info())[2:]
                node.error = _red('│ ') + _red('\n│ ').join(''.join(lines).splitlines())
        node.t_cost = time.time() - node.t_start

    @property
    def debug(self) -> _Tester:
        """ @tester.debug
        """
        return _Tester(self._enable, True)

    @property
    def disable(self) -> _Tester:
        """ @tester.disable
        """
        return _Tester(False, self._debug)

    def filter(self, s: str) -> None:
        """ run only cases whose path matches, ex. tester.filter('scope|depth')
        """
        _Tester._filter = re.compile(s)

    def summary(self) -> int:
        """ print results, return number of failures
        """
        print(_root)
        return _root.totals()[1]


tester = _Tester()
