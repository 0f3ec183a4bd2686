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
from typing import Dict, Iterator, Optional

from hglviz._hgl import HGL
from hglviz.graph import DotNode


class NameTable(HGL):
    """ fully-qualified circuit name -> graph node that drives it 

    ex. 'a', 'sub.io_in', 'sub.mem.r.addr' 

    one table per translation, shared by all module instances. names of 
    instances are prefixed by instance path, so siblings never collide
    """

    __slots__ = '_table'

    def __init__(self) -> None:
        self._table: Dict[str, DotNode] = {}

    def declare(self, name: str, node: DotNode) -> None:
        """ insert or overwrite
        """
        self._table[name] = node 

    def get(self, name: str) -> Optional[DotNode]:
        return self._table.get(name)

    def resolve(self, name: str, fallback: str) -> str:
        """ reference of the declared node, or the fallback when undeclared
        """
        node = self._table.get(name)
        if node is None:
            return fallback 
        return node.as_rhs

    def __contains__(self, name: str) -> bool:
        return name in self._table 

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __str__(self):
        return '\n'.join(f'{k:<40} {v}' for k, v in self._table.items())
