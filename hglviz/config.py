####################################################################################################
#
# hglviz - Graphviz rendering of hierarchical hardware circuits
# Copyright (C) 2022 Jintao Sun
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
####################################################################################################


from __future__ import annotations
from typing import Iterable, List, Optional, Tuple, Union

import re

from hglviz._hgl import HGL
from hglviz.dispatch import singleton


"""
directives tell the visualizer where to start and how deep to descend, 
and which programs draw and open the picture. 

    directives = [
        conf.depth('Top', 1),           # Top: components, submodules: ports only 
        conf.depth('Alu', -1),          # every Alu instance fully expanded
        conf.depth(CIRCUIT, 2),         # everything else 
        conf.dot_program('fdp'),
        conf.open_program('none'),      # do not open the png
    ] 

string form, as accepted by the command line:

    Top:Depth=1     *:Depth=2     DotProgram=fdp     OpenProgram=none
"""


@singleton
class CIRCUIT:
    """ target: the whole circuit
    """
    def __str__(self):
        return '*'

    def __repr__(self):
        return 'CIRCUIT'


class Directive(HGL):

    __slots__ = 'target', 'key', 'value'

    Depth       = 'Depth'
    DotProgram  = 'DotProgram'
    OpenProgram = 'OpenProgram'

    # program name that disables a post-processing step
    Disabled = 'none'

    def __init__(self, target: Union[str, object], key: str, value: str) -> None:
        if key not in (self.Depth, self.DotProgram, self.OpenProgram):
            raise ValueError(f'unknown directive {key!r}')
        # module name or CIRCUIT
        self.target = target 
        self.key = key 
        self.value = str(value).strip()

    @property 
    def is_scope(self) -> bool:
        return self.key == self.Depth 

    @property 
    def max_depth(self) -> int:
        assert self.is_scope, f'{self} is not a depth directive'
        return int(self.value)

    def matches(self, module_name: str) -> bool:
        """ targets this module by name
        """
        return self.target is not CIRCUIT and self.target == module_name

    _pattern = re.compile(r'^\s*(?:([^:=\s]+)\s*:)?\s*(\w+)\s*=\s*(\S*)\s*$')

    @classmethod
    def parse(cls, s: str) -> Directive:
        """ ex. 'Top:Depth=2', '*:Depth=-1', 'Depth=0', 'DotProgram=dot' 

        target defaults to the whole circuit
        """
        m = cls._pattern.match(s)
        if m is None:
            raise ValueError(f'invalid directive {s!r}')
        target, key, value = m.groups()
        if target is None or target == '*':
            target = CIRCUIT 
        ret = cls(target, key, value)
        if ret.is_scope:
            try:
                ret.max_depth 
            except ValueError:
                raise ValueError(f'invalid depth in directive {s!r}') from None
        return ret

    def serialize(self) -> str:
        return f'{self.target}:{self.key}={self.value}'

    def __eq__(self, other):
        if not isinstance(other, Directive):
            return NotImplemented
        return (self.target, self.key, self.value) == (other.target, other.key, other.value)

    __hash__ = HGL.__hash__

    def __str__(self):
        return f'Directive({self.serialize()})'


@singleton 
class conf:
    """ directive constructors
    """

    def depth(self, target: Union[str, object] = CIRCUIT, depth: int = -1) -> Directive:
        """ 
        target: 
            module name to start rendering at, or CIRCUIT 
        depth: 
            the target itself is always drawn in full. 0 adds the ports of its 
            submodules, 1 their components plus ports of their submodules, and 
            so forth. negative means unlimited
        """
        return Directive(target, Directive.Depth, str(int(depth)))

    def dot_program(self, program: str) -> Directive:
        """ program that turns the dot file into png. ex. dot, fdp, neato; 'none' disables
        """
        return Directive(CIRCUIT, Directive.DotProgram, program)

    def open_program(self, program: str) -> Directive:
        """ program called with the png file; 'none' disables
        """
        return Directive(CIRCUIT, Directive.OpenProgram, program)


def split_directives(
    directives: Iterable[Directive], 
    dot_program: str = 'dot', 
    open_program: str = 'open'
) -> Tuple[List[Directive], str, str]:
    """ return (scope directives in order, dot program, open program), later program directives win
    """
    scopes = [] 
    for d in directives:
        if d.key == Directive.DotProgram:
            dot_program = d.value 
        elif d.key == Directive.OpenProgram:
            open_program = d.value 
        else:
            scopes.append(d)
    return scopes, dot_program, open_program
