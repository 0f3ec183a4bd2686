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
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

import re 
import html

from hglviz._hgl import HGL
import hglviz.ir as ir

if TYPE_CHECKING:
    import graphviz
    from hglviz.visualizer.names import NameTable


"""
graph node model 

every node knows 
    - its absolute name: ancestor path joined by '_' 
    - its sink terminal `in_` and source terminal `as_rhs`, as edge endpoints 
    - how to render itself into a graphviz graph
"""


_invalid_char = re.compile(r'[^A-Za-z0-9_]')

def dot_name(s: str) -> str:
    """ ex. io.in[0] -> io_in_0_
    """
    return _invalid_char.sub('_', s)


class DotNode(HGL):

    __slots__ = 'name', 'parent', 'absolute_name'

    def __init__(self, name: str, parent: Optional[DotNode] = None) -> None:
        self.name: str = name 
        self.parent: Optional[DotNode] = parent 
        if parent is None:
            self.absolute_name: str = dot_name(name)
        else:
            self.absolute_name: str = f'{parent.absolute_name}_{dot_name(name)}'

    @property 
    def in_(self) -> str:
        """ reference used when this node is driven
        """
        return self.absolute_name 

    @property 
    def as_rhs(self) -> str:
        """ reference used when this node drives others
        """
        return self.absolute_name

    @property 
    def label(self) -> str:
        return self.name

    def render(self, g: graphviz.Digraph) -> None:
        raise NotImplementedError(self.__class__)

    def __str__(self):
        return f'{self.__class__.__name__}({self.absolute_name})'


class PortNode(DotNode):
    __slots__ = ()

    def render(self, g):
        g.node(self.absolute_name, label=self.label, shape='rectangle')


class NodeNode(DotNode):
    """ wire or node 
    """
    __slots__ = ()

    def render(self, g):
        g.node(self.absolute_name, label=self.label, shape='ellipse')


class RegisterNode(DotNode):
    """ next value is written to `in_`, current value is read from the node 
    """
    __slots__ = ()

    @property 
    def in_(self) -> str:
        return f'{self.absolute_name}:in'

    def render(self, g):
        g.node(self.absolute_name, label=f'{{<in> next|{self.label}}}', shape='Mrecord')


class LiteralNode(DotNode):

    __slots__ = 'value'

    def __init__(self, name: str, value: Any, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, parent) 
        self.value = value 

    @property 
    def label(self) -> str:
        return str(self.value)

    def render(self, g):
        g.node(self.absolute_name, label=self.label, shape='circle')


#----------------------------------
# table nodes
#----------------------------------

def _html_table(inputs: List[Tuple[str, str]], body: str, color: str = '#CCCCCC') -> str:
    """ one column of input cells, one cell of body spanning all rows as output
    """
    rows = []
    n = max(len(inputs), 1)
    for i, (port, text) in enumerate(inputs):
        cell = f'<TD PORT="{port}">{text}</TD>'
        if i == 0:
            cell += f'<TD ROWSPAN="{n}" PORT="out">{body}</TD>'
        rows.append(f'<TR>{cell}</TR>')
    if not rows:
        rows.append(f'<TR><TD PORT="out">{body}</TD></TR>')
    return (
        f'<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0" CELLPADDING="4" BGCOLOR="{color}">'
        f'{"".join(rows)}</TABLE>>'
    )


_dot = '&#x2022;'


class OperatorNode(DotNode):
    """ primitive operator, output at `<absolute_name>:out`
    """

    __slots__ = 'symbol'

    inputs: Tuple[str, ...] = ()
    color = '#CCCCCC'

    def __init__(self, name: str, symbol: str, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, parent)
        self.symbol = symbol 

    def terminal(self, port: str) -> str:
        return f'{self.absolute_name}:{port}'

    @property 
    def in1(self) -> str:
        return self.terminal('in1')

    @property 
    def in_(self) -> str:
        return self.in1

    @property 
    def as_rhs(self) -> str:
        return self.terminal('out')

    @property 
    def label(self) -> str:
        return self.symbol

    def render(self, g):
        inputs = [(i, _dot) for i in self.inputs]
        g.node(self.absolute_name, label=_html_table(inputs, html.escape(self.label), self.color), shape='plaintext')


class BinaryOpNode(OperatorNode):
    __slots__ = ()
    inputs = ('in1', 'in2')

    @property 
    def in2(self) -> str:
        return self.terminal('in2')


class UnaryOpNode(OperatorNode):
    __slots__ = ()
    inputs = ('in1',)


class OneArgOneParamOpNode(OperatorNode):
    """ ex. shl(x, 2), label: shl(2)
    """

    __slots__ = 'param'
    inputs = ('in1',)

    def __init__(self, name: str, symbol: str, param: int, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, symbol, parent) 
        self.param = param 

    @property 
    def label(self) -> str:
        return f'{self.symbol}({self.param})'


class OneArgTwoParamOpNode(OperatorNode):
    """ ex. bits(x, 7, 0), label: bits(7, 0)
    """

    __slots__ = 'param1', 'param2'
    inputs = ('in1',)

    def __init__(self, name: str, symbol: str, param1: int, param2: int, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, symbol, parent) 
        self.param1 = param1 
        self.param2 = param2 

    @property 
    def label(self) -> str:
        return f'{self.symbol}({self.param1}, {self.param2})'


class MuxNode(OperatorNode):
    """ select ? in1 : in2
    """

    __slots__ = ()
    inputs = ('select', 'in1', 'in2')
    color = '#AFEEEE'

    def __init__(self, name: str, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, 'mux', parent) 

    @property 
    def select(self) -> str:
        return self.terminal('select')

    @property 
    def in2(self) -> str:
        return self.terminal('in2')

    def render(self, g):
        inputs = [('select', 'sel'), ('in1', '1'), ('in2', '0')]
        g.node(self.absolute_name, label=_html_table(inputs, 'mux', self.color), shape='plaintext')


class ValidIfNode(OperatorNode):
    """ in1 when select, otherwise undefined
    """

    __slots__ = ()
    inputs = ('select', 'in1')
    color = '#FFE4B5'

    def __init__(self, name: str, parent: Optional[DotNode] = None) -> None:
        super().__init__(name, 'validif', parent) 

    @property 
    def select(self) -> str:
        return self.terminal('select')

    def render(self, g):
        inputs = [('select', 'valid'), ('in1', 'in')]
        g.node(self.absolute_name, label=_html_table(inputs, 'validif', self.color), shape='plaintext')


#----------------------------------
# memory
#----------------------------------

class MemoryPort(DotNode):
    """ one field of one memory port, ex. mem.r.addr 

    a cell of the memory table, not rendered by itself
    """

    __slots__ = 'port', 'field'

    def __init__(self, port: str, field: str, memory: MemoryNode) -> None:
        super().__init__(f'{port}_{field}', memory)
        self.port = port 
        self.field = field 
        self.absolute_name = f'{memory.absolute_name}:{dot_name(self.name)}'

    def render(self, g):
        pass


class MemoryNode(DotNode):
    """ memory with read/write/readwrite ports 

    every port field is declared in the name table as `<firrtl name>.<port>.<field>`
    """

    __slots__ = 'memory', 'ports'

    reader_fields = ('en', 'addr', 'data', 'clk')
    writer_fields = ('en', 'addr', 'data', 'mask', 'clk')
    readwriter_fields = ('en', 'addr', 'wmode', 'wdata', 'wmask', 'rdata', 'clk')

    def __init__(
        self, 
        name: str, 
        parent: Optional[DotNode], 
        firrtl_name: str, 
        memory: ir.DefMemory, 
        names: NameTable
    ) -> None:
        super().__init__(name, parent)
        self.memory = memory 
        # (kind, port name, List[MemoryPort])
        self.ports: List[Tuple[str, str, List[MemoryPort]]] = []
        for kind, port_names, fields in (
            ('read', memory.readers, self.reader_fields),
            ('write', memory.writers, self.writer_fields),
            ('readwrite', memory.readwriters, self.readwriter_fields),
        ):
            for port_name in port_names:
                cells = []
                for field in fields:
                    cell = MemoryPort(port_name, field, self)
                    names.declare(f'{firrtl_name}.{port_name}.{field}', cell)
                    cells.append(cell)
                self.ports.append((kind, port_name, cells))

    def render(self, g):
        rows = [f'<TR><TD COLSPAN="2">Mem {html.escape(self.name)}</TD></TR>']
        for kind, port_name, cells in self.ports:
            rows.append(f'<TR><TD ROWSPAN="{len(cells)}">{kind} {html.escape(port_name)}</TD>')
            for i, cell in enumerate(cells):
                td = f'<TD PORT="{dot_name(cell.name)}">{cell.field}</TD></TR>'
                rows.append(td if i == 0 else f'<TR>{td}')
        label = (
            '<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0" CELLPADDING="4" BGCOLOR="#DDA0DD">'
            f'{"".join(rows)}</TABLE>>'
        )
        g.node(self.absolute_name, label=label, shape='plaintext')


__all__ = [
    'dot_name', 'DotNode', 'PortNode', 'NodeNode', 'RegisterNode', 'LiteralNode', 
    'OperatorNode', 'BinaryOpNode', 'UnaryOpNode', 'OneArgOneParamOpNode', 'OneArgTwoParamOpNode', 
    'MuxNode', 'ValidIfNode', 'MemoryPort', 'MemoryNode',
]
