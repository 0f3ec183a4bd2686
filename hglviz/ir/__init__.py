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
from typing import Any, Dict, List, Optional, Tuple, Union

import enum

import gmpy2

from hglviz._hgl import HGL


"""
elaborated circuit, low form 

Circuit 
  ├── Module: ports + body (Block of statements)
  └── ExtModule: ports only

statements and expressions are closed sets of classes, every one of them 
can `serialize()` back to the source text
"""


class Direction(enum.Enum):
    Input = 'input'
    Output = 'output'


class Port(HGL):

    __slots__ = 'name', 'direction', 'tpe'

    def __init__(self, name: str, direction: Direction, tpe: str = '') -> None:
        self.name = name 
        self.direction = direction 
        # source text of type, ex. UInt<8>
        self.tpe = tpe 

    def serialize(self) -> str:
        return f'{self.direction.value} {self.name} : {self.tpe}'

    def __str__(self):
        return f'Port({self.direction.value} {self.name})'


#----------------------------------
# Expressions
#----------------------------------

class Expression(HGL):

    __slots__ = ()

    def serialize(self) -> str:
        raise NotImplementedError(self.__class__)

    def __str__(self):
        return f'{self.__class__.__name__}({self.serialize()})'


class Reference(Expression):

    __slots__ = 'name', 'tpe'

    def __init__(self, name: str, tpe: str = '') -> None:
        self.name = name 
        self.tpe = tpe

    def serialize(self) -> str:
        return self.name


class SubField(Expression):
    """ a.b
    """

    __slots__ = 'expr', 'name', 'tpe'

    def __init__(self, expr: Expression, name: str, tpe: str = '') -> None:
        self.expr = expr 
        self.name = name 
        self.tpe = tpe

    def serialize(self) -> str:
        return f'{self.expr.serialize()}.{self.name}'


class SubIndex(Expression):
    """ a[3]
    """

    __slots__ = 'expr', 'value', 'tpe'

    def __init__(self, expr: Expression, value: int, tpe: str = '') -> None:
        self.expr = expr 
        self.value = value 
        self.tpe = tpe

    def serialize(self) -> str:
        return f'{self.expr.serialize()}[{self.value}]'


class SubAccess(Expression):
    """ a[i], dynamic index
    """

    __slots__ = 'expr', 'index', 'tpe'

    def __init__(self, expr: Expression, index: Expression, tpe: str = '') -> None:
        self.expr = expr 
        self.index = index 
        self.tpe = tpe

    def serialize(self) -> str:
        return f'{self.expr.serialize()}[{self.index.serialize()}]'


class Mux(Expression):

    __slots__ = 'cond', 'tval', 'fval'

    def __init__(self, cond: Expression, tval: Expression, fval: Expression) -> None:
        self.cond = cond 
        self.tval = tval 
        self.fval = fval

    def serialize(self) -> str:
        return f'mux({self.cond.serialize()}, {self.tval.serialize()}, {self.fval.serialize()})'


class ValidIf(Expression):

    __slots__ = 'cond', 'value'

    def __init__(self, cond: Expression, value: Expression) -> None:
        self.cond = cond 
        self.value = value

    def serialize(self) -> str:
        return f'validif({self.cond.serialize()}, {self.value.serialize()})'


class DoPrim(Expression):
    """ primitive operator, ex. bits(x, 7, 0)

    op is the operator name in source text, unknown names are kept
    """

    __slots__ = 'op', 'args', 'consts'

    def __init__(self, op: str, args: List[Expression], consts: List[int] = ()) -> None:
        self.op = op 
        self.args = list(args)
        self.consts = [int(i) for i in consts]

    def serialize(self) -> str:
        items = [i.serialize() for i in self.args] + [str(i) for i in self.consts]
        return f"{self.op}({', '.join(items)})"


class Literal(Expression):

    __slots__ = 'value', 'width'
    _kind = ''

    def __init__(self, value: Union[int, gmpy2.mpz], width: Optional[int] = None) -> None:
        self.value = gmpy2.mpz(value) 
        self.width = width

    def serialize(self) -> str:
        w = '' if self.width is None else f'<{self.width}>'
        if self.value < 0:
            return f'{self._kind}{w}("h-{gmpy2.digits(-self.value, 16)}")'
        return f'{self._kind}{w}("h{gmpy2.digits(self.value, 16)}")'


class UIntLiteral(Literal):
    __slots__ = ()
    _kind = 'UInt'


class SIntLiteral(Literal):
    __slots__ = ()
    _kind = 'SInt'


#----------------------------------
# Statements
#----------------------------------

class Statement(HGL):

    __slots__ = ()

    def serialize(self) -> str:
        raise NotImplementedError(self.__class__)

    def __str__(self):
        return f'{self.__class__.__name__}({self.serialize()})'


class EmptyStmt(Statement):
    __slots__ = ()

    def serialize(self) -> str:
        return 'skip'


class Block(Statement):

    __slots__ = 'stmts'

    def __init__(self, stmts: List[Statement] = ()) -> None:
        self.stmts: List[Statement] = list(stmts)

    def serialize(self) -> str:
        return '\n'.join(i.serialize() for i in self.stmts)

    def __str__(self):
        return f'Block({len(self.stmts)})'


class Connect(Statement):
    """ loc <= expr
    """

    __slots__ = 'loc', 'expr'

    def __init__(self, loc: Expression, expr: Expression) -> None:
        self.loc = loc 
        self.expr = expr

    def serialize(self) -> str:
        return f'{self.loc.serialize()} <= {self.expr.serialize()}'


class PartialConnect(Connect):
    """ loc <- expr
    """
    __slots__ = ()

    def serialize(self) -> str:
        return f'{self.loc.serialize()} <- {self.expr.serialize()}'


class IsInvalid(Statement):

    __slots__ = 'expr'

    def __init__(self, expr: Expression) -> None:
        self.expr = expr

    def serialize(self) -> str:
        return f'{self.expr.serialize()} is invalid'


class DefInstance(Statement):
    """ inst name of module
    """

    __slots__ = 'name', 'module'

    def __init__(self, name: str, module: str) -> None:
        self.name = name 
        self.module = module

    def serialize(self) -> str:
        return f'inst {self.name} of {self.module}'


class DefNode(Statement):

    __slots__ = 'name', 'value'

    def __init__(self, name: str, value: Expression) -> None:
        self.name = name 
        self.value = value

    def serialize(self) -> str:
        return f'node {self.name} = {self.value.serialize()}'


class DefWire(Statement):

    __slots__ = 'name', 'tpe'

    def __init__(self, name: str, tpe: str = '') -> None:
        self.name = name 
        self.tpe = tpe

    def serialize(self) -> str:
        return f'wire {self.name} : {self.tpe}'


class DefRegister(Statement):

    __slots__ = 'name', 'tpe', 'clock', 'reset', 'init'

    def __init__(
        self, 
        name: str, 
        tpe: str = '', 
        clock: Optional[Expression] = None, 
        reset: Optional[Expression] = None, 
        init: Optional[Expression] = None
    ) -> None:
        self.name = name 
        self.tpe = tpe 
        self.clock = clock 
        self.reset = reset 
        self.init = init

    def serialize(self) -> str:
        ret = f'reg {self.name} : {self.tpe}'
        if self.clock is not None:
            ret += f', {self.clock.serialize()}'
        if self.reset is not None and self.init is not None:
            ret += f' with : (reset => ({self.reset.serialize()}, {self.init.serialize()}))'
        return ret


class DefMemory(Statement):

    __slots__ = (
        'name', 'data_type', 'depth', 'write_latency', 'read_latency', 
        'readers', 'writers', 'readwriters', 'read_under_write'
    )

    def __init__(
        self, 
        name: str, 
        data_type: str = '', 
        depth: int = 0, 
        write_latency: int = 1, 
        read_latency: int = 0,
        readers: List[str] = (),
        writers: List[str] = (),
        readwriters: List[str] = (),
        read_under_write: str = 'undefined',
    ) -> None:
        self.name = name 
        self.data_type = data_type 
        self.depth = depth 
        self.write_latency = write_latency 
        self.read_latency = read_latency 
        self.readers = list(readers)
        self.writers = list(writers)
        self.readwriters = list(readwriters)
        self.read_under_write = read_under_write

    def serialize(self) -> str:
        ret = [
            f'mem {self.name} :', 
            f'  data-type => {self.data_type}',
            f'  depth => {self.depth}',
            f'  read-latency => {self.read_latency}',
            f'  write-latency => {self.write_latency}',
        ]
        ret.extend(f'  reader => {i}' for i in self.readers)
        ret.extend(f'  writer => {i}' for i in self.writers)
        ret.extend(f'  readwriter => {i}' for i in self.readwriters)
        ret.append(f'  read-under-write => {self.read_under_write}')
        return '\n'.join(ret)


class Conditionally(Statement):
    """ when pred : conseq else : alt
    """

    __slots__ = 'pred', 'conseq', 'alt'

    def __init__(self, pred: Expression, conseq: Block, alt: Optional[Block] = None) -> None:
        self.pred = pred 
        self.conseq = conseq 
        self.alt = alt if alt is not None else Block()

    def serialize(self) -> str:
        ret = [f'when {self.pred.serialize()} :']
        ret.extend('  ' + i for i in self.conseq.serialize().splitlines())
        if self.alt.stmts:
            ret.append('else :')
            ret.extend('  ' + i for i in self.alt.serialize().splitlines())
        return '\n'.join(ret)


class Stop(Statement):

    __slots__ = 'clk', 'en', 'ret'

    def __init__(self, clk: Expression, en: Expression, ret: int = 0) -> None:
        self.clk = clk 
        self.en = en 
        self.ret = ret

    def serialize(self) -> str:
        return f'stop({self.clk.serialize()}, {self.en.serialize()}, {self.ret})'


class Print(Statement):

    __slots__ = 'clk', 'en', 'string', 'args'

    def __init__(self, clk: Expression, en: Expression, string: str, args: List[Expression] = ()) -> None:
        self.clk = clk 
        self.en = en 
        self.string = string 
        self.args = list(args)

    def serialize(self) -> str:
        items = [self.clk.serialize(), self.en.serialize(), f'"{self.string}"']
        items.extend(i.serialize() for i in self.args)
        return f"printf({', '.join(items)})"


class Attach(Statement):

    __slots__ = 'exprs'

    def __init__(self, exprs: List[Expression]) -> None:
        self.exprs = list(exprs)

    def serialize(self) -> str:
        return f"attach({', '.join(i.serialize() for i in self.exprs)})"


#----------------------------------
# Modules
#----------------------------------

class DefModule(HGL):

    __slots__ = 'name', 'ports'

    def __init__(self, name: str, ports: List[Port] = ()) -> None:
        self.name = name 
        self.ports: List[Port] = list(ports)

    def __str__(self):
        return f'{self.__class__.__name__}({self.name})'


class Module(DefModule):

    __slots__ = 'body'

    def __init__(self, name: str, ports: List[Port] = (), body: Optional[Statement] = None) -> None:
        super().__init__(name, ports)
        self.body: Statement = body if body is not None else Block()

    def serialize(self) -> str:
        ret = [f'module {self.name} :']
        ret.extend(f'  {i.serialize()}' for i in self.ports)
        ret.extend(f'  {i}' for i in self.body.serialize().splitlines())
        return '\n'.join(ret)


class ExtModule(DefModule):

    __slots__ = 'defname', 'params'

    def __init__(
        self, 
        name: str, 
        ports: List[Port] = (), 
        defname: str = '', 
        params: Dict[str, Any] = None
    ) -> None:
        super().__init__(name, ports)
        self.defname = defname or name 
        self.params: Dict[str, Any] = dict(params or {})

    def serialize(self) -> str:
        ret = [f'extmodule {self.name} :']
        ret.extend(f'  {i.serialize()}' for i in self.ports)
        ret.append(f'  defname = {self.defname}')
        ret.extend(f'  parameter {k} = {v}' for k, v in self.params.items())
        return '\n'.join(ret)


class Circuit(HGL):

    __slots__ = 'main', 'modules'

    def __init__(self, main: str, modules: List[DefModule] = ()) -> None:
        self.main = main 
        self.modules: List[DefModule] = list(modules)

    def find(self, name: str) -> Optional[DefModule]:
        """ first module named `name`, or None
        """
        for m in self.modules:
            if m.name == name:
                return m 
        return None

    def serialize(self) -> str:
        ret = [f'circuit {self.main} :']
        for m in self.modules:
            ret.extend(f'  {i}' for i in m.serialize().splitlines())
        return '\n'.join(ret)

    def __str__(self):
        return f"Circuit({self.main}: {', '.join(i.name for i in self.modules)})"
