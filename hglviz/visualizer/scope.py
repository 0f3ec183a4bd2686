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
from typing import Iterable, Optional

from hglviz._hgl import HGL
from hglviz.config import CIRCUIT, Directive

class Scope(HGL):
    """ how much of a module instance is rendered 

    depth: 
        levels descended below the entry module of this scope 
    max_depth: 
        negative means unlimited 
    descended: 
        False only for the default scope of the root, before any directive or 
        descent applied
    entry: 
        True for the module a directive starts the scope at. an entry module is 
        always rendered in full, its sub-instances are at depth 0
    """

    __slots__ = 'depth', 'max_depth', 'descended', 'entry'

    def __init__(self, depth: int = 0, max_depth: int = -1, descended: bool = False, entry: bool = False) -> None:
        self.depth = depth 
        self.max_depth = max_depth 
        self.descended = descended
        self.entry = entry

    @property 
    def unlimited(self) -> bool:
        return self.max_depth < 0

    @property 
    def do_ports(self) -> bool:
        return self.entry or self.unlimited or self.depth <= self.max_depth

    @property 
    def do_components(self) -> bool:
        return self.entry or self.unlimited or self.depth < self.max_depth

    def descend(self) -> Scope:
        # the entry level is not counted
        if self.entry:
            return Scope(self.depth, self.max_depth, True)
        return Scope(self.depth + 1, self.max_depth, True)

    def astuple(self):
        return (self.depth, self.max_depth)

    def __str__(self):
        entry = ', entry' if self.entry else ''
        return f'Scope(depth={self.depth}, max_depth={self.max_depth}{entry})'


def get_scope(module_name: str, directives: Iterable[Directive], current: Optional[Scope] = None) -> Scope:
    """ scope of an instance of `module_name` inside a module of scope `current` 

    1. the first depth directive naming the module starts an entry scope at (0, depth)
    2. otherwise, the first whole-circuit directive does the same, only while 
       `current` is still the undescended default 
    3. otherwise, descend from `current`
    """
    if current is None:
        current = Scope()
    circuit_wide = None 
    for d in directives:
        if not d.is_scope:
            continue 
        if d.matches(module_name):
            return Scope(0, d.max_depth, True, True)
        if d.target is CIRCUIT and circuit_wide is None:
            circuit_wide = d 
    if circuit_wide is not None and not current.descended:
        return Scope(0, circuit_wide.max_depth, True, True)
    return current.descend()
