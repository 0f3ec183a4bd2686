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
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .dotnode import DotNode, dot_name


class ModuleNode(DotNode):
    """ a module instance: ordered children and edges, rendered as a cluster 

    children with the same name are all kept, resolution of names is done by 
    the name table, not here
    """

    __slots__ = 'children', 'edges', '_n_names', '_taken'

    def __init__(self, name: str, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, parent)
        self.children: List[DotNode] = [] 
        # (source, sink)
        self.edges: List[Tuple[str, str]] = [] 
        self._n_names = 0
        # local names in dot form, never given to a synthetic node
        self._taken: Set[str] = set()

    def add_child(self, node: DotNode) -> DotNode:
        self.children.append(node)
        self._taken.add(dot_name(node.name))
        return node 

    def reserve(self, *names: str) -> None:
        """ names declared by the module, possibly before their nodes exist
        """
        self._taken.update(dot_name(i) for i in names)

    def is_taken(self, name: str) -> bool:
        return dot_name(name) in self._taken

    def __iadd__(self, node: DotNode) -> ModuleNode:
        self.add_child(node)
        return self

    def connect(self, sink: str, source: str) -> None:
        """ edge source -> sink, both are references, not nodes
        """
        self.edges.append((source, sink))

    def new_name(self, prefered: str) -> str:
        """ get a new name unique in this module. ex. mux_0, add_1, ...
        """
        while True:
            ret = f'{prefered}_{self._n_names}'
            self._n_names += 1 
            if not self.is_taken(ret):
                return ret

    def submodules(self) -> Iterator[ModuleNode]:
        for i in self.children:
            if isinstance(i, ModuleNode):
                yield i 

    def iter_nodes(self, recursive: bool = True) -> Iterator[DotNode]:
        """ all non-module nodes, depth first in declaration order
        """
        for i in self.children:
            if isinstance(i, ModuleNode):
                if recursive:
                    yield from i.iter_nodes()
            else:
                yield i 

    def iter_edges(self, recursive: bool = True) -> Iterator[Tuple[str, str]]:
        yield from self.edges 
        if recursive:
            for m in self.submodules():
                yield from m.iter_edges()

    def render(self, g):
        with g.subgraph(name=f'cluster_{self.absolute_name}') as s:
            s.attr(label=self.name)
            for node in self.children:
                node.render(s)
            for source, sink in self.edges:
                s.edge(source, sink)

    def __str__(self):
        return f'ModuleNode({self.absolute_name}, {len(self.children)} children, {len(self.edges)} edges)'
