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
from typing import Dict, Iterable, List, Optional, Tuple

import enum

import graphviz

import hglviz.ir as ir
import hglviz.tester.utils as tester_utils
from hglviz._hgl import HGL
from hglviz.dispatch import Dispatcher
from hglviz.config import Directive
from hglviz.graph import *
from hglviz.visualizer.scope import Scope, get_scope
from hglviz.visualizer._session import Session, VisualizerError


# reference of a primitive operator that has no node shape
PLACEHOLDER_OP = 'dummy'
# reference of an expression kind that is not rendered
UNKNOWN_EXPR = 'unknown'
# sink of a connection whose target is not a reference
BAD_NAME = 'badName'


class OpShape(enum.Enum):
    Binary = 'binary'               # in1, in2
    Unary = 'unary'                 # in1
    OneParam = 'one_param'          # in1, 1 constant 
    TwoParam = 'two_param'          # in1, 2 constants


# primitive operator -> (shape, label)
PRIMOPS: Dict[str, Tuple[OpShape, str]] = {
    'add':      (OpShape.Binary, 'add'),
    'sub':      (OpShape.Binary, 'sub'),
    'mul':      (OpShape.Binary, 'mul'),
    'div':      (OpShape.Binary, 'div'),
    'rem':      (OpShape.Binary, 'rem'),

    'eq':       (OpShape.Binary, 'eq'),
    'neq':      (OpShape.Binary, 'neq'),
    'lt':       (OpShape.Binary, 'lt'),
    'leq':      (OpShape.Binary, 'lte'),
    'gt':       (OpShape.Binary, 'gt'),
    'geq':      (OpShape.Binary, 'gte'),

    'pad':      (OpShape.Unary, 'pad'),

    'asUInt':   (OpShape.Unary, 'asUInt'),
    'asSInt':   (OpShape.Unary, 'asSInt'),

    'shl':      (OpShape.OneParam, 'shl'),
    'shr':      (OpShape.OneParam, 'shr'),

    'dshl':     (OpShape.Binary, 'dshl'),
    'dshr':     (OpShape.Binary, 'dshr'),

    'cvt':      (OpShape.Unary, 'cvt'),
    'neg':      (OpShape.Unary, 'neg'),
    'not':      (OpShape.Unary, 'not'),

    'and':      (OpShape.Binary, 'and'),
    'or':       (OpShape.Binary, 'or'),
    'xor':      (OpShape.Binary, 'xor'),

    'andr':     (OpShape.Unary, 'andr'),
    'orr':      (OpShape.Unary, 'orr'),
    'xorr':     (OpShape.Unary, 'xorr'),

    'cat':      (OpShape.Binary, 'cat'),

    'bits':     (OpShape.TwoParam, 'bits'),
    'head':     (OpShape.OneParam, 'head'),
    'tail':     (OpShape.OneParam, 'tail'),
}

# (n_args, n_consts) needed by each shape
_arity = {
    OpShape.Binary: (2, 0),
    OpShape.Unary: (1, 0),
    OpShape.OneParam: (1, 1),
    OpShape.TwoParam: (1, 2),
}


_declarations = (ir.DefWire, ir.DefRegister, ir.DefNode, ir.DefInstance, ir.DefMemory)


def declared_names(s: ir.Statement) -> Iterable[str]:
    """ names declared by a statement and the statements nested in it
    """
    if isinstance(s, _declarations):
        yield s.name
    elif isinstance(s, ir.Block):
        for sub in s.stmts:
            yield from declared_names(sub)
    elif isinstance(s, ir.Conditionally):
        yield from declared_names(s.conseq)
        yield from declared_names(s.alt)


class _ModuleContext:
    """ a module instance being translated
    """

    __slots__ = 'prefix', 'module', 'node', 'scope', 'do_ports', 'do_components'

    def __init__(self, prefix: str, module: ir.DefModule, node: ModuleNode, scope: Scope) -> None:
        # path of instance names, ex. 'core.alu'; empty for the root
        self.prefix = prefix 
        self.module = module 
        self.node = node 
        self.scope = scope 
        self.do_ports = scope.do_ports 
        self.do_components = scope.do_components

    def firrtl_name(self, name: str) -> str:
        """ name in the name table, usually has dots as separators
        """
        return name if not self.prefix else f'{self.prefix}.{name}'

    def expand(self, name: str) -> str:
        """ dot name of an element of this module that may not have a node
        """
        return f'{self.node.absolute_name}_{dot_name(name)}'


class VisualizerPass(HGL):
    """ translate a circuit into a graph of nested module nodes 

    directives: 
        depth directives, first match wins, see `get_scope`
    """

    __slots__ = 'directives', 'sess', 'circuit', 'dispatcher'

    def __init__(self, directives: Iterable[Directive] = (), session: Optional[Session] = None) -> None:
        self.directives: List[Directive] = [d for d in directives if d.is_scope]
        self.sess: Session = session if session is not None else Session()
        self.circuit: Optional[ir.Circuit] = None

        d = Dispatcher()
        d.dispatch('stmt', self.process_block, ir.Block)
        d.dispatch('stmt', self.process_connect, ir.Connect)
        d.dispatch('stmt', self.process_instance, ir.DefInstance)
        d.dispatch('stmt', self.process_node, ir.DefNode)
        d.dispatch('stmt', self.process_wire, ir.DefWire)
        d.dispatch('stmt', self.process_register, ir.DefRegister)
        d.dispatch('stmt', self.process_memory, ir.DefMemory)
        d.default('stmt', self.ignore_statement)

        d.dispatch('expr', self.process_reference, [ir.Reference, ir.SubField, ir.SubIndex])
        d.dispatch('expr', self.process_mux, ir.Mux)
        d.dispatch('expr', self.process_validif, ir.ValidIf)
        d.dispatch('expr', self.process_primop, ir.DoPrim)
        d.dispatch('expr', self.process_literal, [ir.UIntLiteral, ir.SIntLiteral])
        d.default('expr', self.unknown_expression)

        d.dispatch('sink', self.sink_reference, [ir.Reference, ir.SubField, ir.SubIndex])
        d.default('sink', self.bad_sink)
        self.dispatcher = d

    #----------------------------------
    # driver
    #----------------------------------

    def find_module(self, name: str) -> Optional[ir.DefModule]:
        return self.circuit.find(name)

    def build(self, circuit: ir.Circuit) -> ModuleNode:
        """ graph of the main module, nothing is written
        """
        self.circuit = circuit 
        top = self.find_module(circuit.main)
        if top is None:
            raise VisualizerError(f'could not find top level module {circuit.main}')
        root = ModuleNode(circuit.main, parent=None)
        self.process_module('', top, root, get_scope(top.name, self.directives))
        return root

    def to_digraph(self, root: ModuleNode) -> graphviz.Digraph:
        g = graphviz.Digraph(root.name, graph_attr={'overlap': 'false'})
        root.render(g)
        return g

    def run(self, circuit: ir.Circuit, filename: Optional[str] = None) -> str:
        """ write `<main>.dot` into the build directory, return its path
        """
        root = self.build(circuit)
        g = self.to_digraph(root)
        filepath = self.sess.get_filepath(filename or f'{circuit.main}.dot')
        g.save(filepath)
        print(tester_utils._yellow('Graphviz: ') + filepath)
        return filepath

    #----------------------------------
    # modules
    #----------------------------------

    def process_module(
        self, 
        prefix: str, 
        module: ir.DefModule, 
        node: ModuleNode, 
        scope: Scope, 
    ) -> ModuleNode:
        ctx = _ModuleContext(prefix, module, node, scope)
        # synthetic names must not shadow names of the module
        node.reserve(*(p.name for p in module.ports))
        if isinstance(module, ir.Module):
            node.reserve(*declared_names(module.body))
        self.sess.n_modules += 1
        #-----------------------
        if self.sess.verbose_scope:
            self.sess.print(f'Module: {prefix or module.name} ({module.name}) {scope}', 1)
        #-----------------------
        self.process_ports(ctx)
        if isinstance(module, ir.Module):
            self.process_statement(module.body, ctx)
        #-----------------------
        if self.sess.verbose_scope:
            self.sess.print(f'{node}')
            self.sess.print(None, -1)
        #-----------------------
        return node

    def process_ports(self, ctx: _ModuleContext) -> None:
        if not ctx.do_ports:
            return 
        for direction in (ir.Direction.Input, ir.Direction.Output):
            for port in ctx.module.ports:
                if port.direction is direction:
                    port_node = PortNode(port.name, ctx.node)
                    self.sess.names.declare(ctx.firrtl_name(port.name), port_node)
                    ctx.node += port_node 

    #----------------------------------
    # statements
    #----------------------------------

    def process_statement(self, s: ir.Statement, ctx: _ModuleContext) -> None:
        self.dispatcher.call('stmt', s, ctx)

    def process_block(self, block: ir.Block, ctx: _ModuleContext) -> None:
        for sub in block.stmts:
            self.process_statement(sub, ctx)

    def process_connect(self, con: ir.Connect, ctx: _ModuleContext) -> None:
        if not ctx.do_components:
            return 
        firrtl_name, dot = self.dispatcher.call('sink', con.loc, ctx)
        node = self.sess.names.get(firrtl_name)
        # registers are written at `in`, memory ports at their cell
        lhs = node.in_ if node is not None else dot
        ctx.node.connect(lhs, self.process_expression(con.expr, ctx))

    def sink_reference(self, loc: ir.Expression, ctx: _ModuleContext) -> Tuple[str, str]:
        name = loc.serialize()
        return ctx.firrtl_name(name), ctx.expand(name)

    def bad_sink(self, loc: ir.Expression, ctx: _ModuleContext) -> Tuple[str, str]:
        msg = f'found bad connect arg {loc} in {ctx.module.name}'
        if self.sess.strict:
            raise VisualizerError(msg)
        self.sess.log.warning(msg)
        return BAD_NAME, BAD_NAME

    def process_instance(self, inst: ir.DefInstance, ctx: _ModuleContext) -> None:
        sub_node = ModuleNode(inst.name, ctx.node)
        ctx.node += sub_node
        sub_module = self.find_module(inst.module)
        if sub_module is None:
            self.sess.log.warning(f'could not find module {inst.module} of instance {ctx.firrtl_name(inst.name)}')
            return 
        scope = get_scope(inst.module, self.directives, ctx.scope)
        self.process_module(ctx.firrtl_name(inst.name), sub_module, sub_node, scope)

    def process_node(self, s: ir.DefNode, ctx: _ModuleContext) -> None:
        if not ctx.do_components:
            return 
        node = NodeNode(s.name, ctx.node)
        ctx.node += node 
        self.sess.names.declare(ctx.firrtl_name(s.name), node)
        ctx.node.connect(node.in_, self.process_expression(s.value, ctx))

    def process_wire(self, s: ir.DefWire, ctx: _ModuleContext) -> None:
        if not ctx.do_components:
            return 
        node = NodeNode(s.name, ctx.node)
        ctx.node += node 
        self.sess.names.declare(ctx.firrtl_name(s.name), node)

    def process_register(self, s: ir.DefRegister, ctx: _ModuleContext) -> None:
        if not ctx.do_components:
            return 
        node = RegisterNode(s.name, ctx.node)
        ctx.node += node 
        self.sess.names.declare(ctx.firrtl_name(s.name), node)

    def process_memory(self, s: ir.DefMemory, ctx: _ModuleContext) -> None:
        # rendered whatever the scope
        ctx.node += MemoryNode(s.name, ctx.node, ctx.firrtl_name(s.name), s, self.sess.names)

    def ignore_statement(self, s: ir.Statement, ctx: _ModuleContext) -> None:
        #-----------------------
        if self.sess.verbose_graph:
            self.sess.print(f'skip {s}')
        #-----------------------

    #----------------------------------
    # expressions
    #----------------------------------

    def process_expression(self, e: ir.Expression, ctx: _ModuleContext) -> str:
        """ lower an expression into nodes, return the reference that drives its value
        """
        return self.dispatcher.call('expr', e, ctx)

    def process_reference(self, e: ir.Expression, ctx: _ModuleContext) -> str:
        name = e.serialize()
        return self.sess.names.resolve(ctx.firrtl_name(name), ctx.expand(name))

    def process_mux(self, e: ir.Mux, ctx: _ModuleContext) -> str:
        mux = MuxNode(ctx.node.new_name('mux'), ctx.node)
        ctx.node += mux 
        ctx.node.connect(mux.select, self.process_expression(e.cond, ctx))
        ctx.node.connect(mux.in1, self.process_expression(e.tval, ctx))
        ctx.node.connect(mux.in2, self.process_expression(e.fval, ctx))
        return mux.as_rhs

    def process_validif(self, e: ir.ValidIf, ctx: _ModuleContext) -> str:
        validif = ValidIfNode(ctx.node.new_name('validif'), ctx.node)
        ctx.node += validif 
        ctx.node.connect(validif.select, self.process_expression(e.cond, ctx))
        ctx.node.connect(validif.in1, self.process_expression(e.value, ctx))
        return validif.as_rhs

    def process_literal(self, e: ir.Literal, ctx: _ModuleContext) -> str:
        name = f'lit{self.sess.new_literal_id()}'
        while ctx.node.is_taken(name):
            name = f'lit{self.sess.new_literal_id()}'
        lit = LiteralNode(name, e.value, ctx.node)
        ctx.node += lit 
        return lit.as_rhs

    def process_primop(self, e: ir.DoPrim, ctx: _ModuleContext) -> str:
        if e.op not in PRIMOPS:
            self.sess.log.warning(f'unsupported primitive operator {e.op} in {ctx.module.name}')
            return PLACEHOLDER_OP
        shape, symbol = PRIMOPS[e.op]
        n_args, n_consts = _arity[shape]
        if len(e.args) < n_args or len(e.consts) < n_consts:
            self.sess.log.warning(f'malformed primitive operator {e.serialize()} in {ctx.module.name}')
            return PLACEHOLDER_OP
        
        name = ctx.node.new_name(symbol)
        if shape is OpShape.Binary:
            op = BinaryOpNode(name, symbol, ctx.node)
        elif shape is OpShape.Unary:
            op = UnaryOpNode(name, symbol, ctx.node)
        elif shape is OpShape.OneParam:
            op = OneArgOneParamOpNode(name, symbol, e.consts[0], ctx.node)
        else:
            op = OneArgTwoParamOpNode(name, symbol, e.consts[0], e.consts[1], ctx.node)
        ctx.node += op 

        ctx.node.connect(op.in1, self.process_expression(e.args[0], ctx))
        if shape is OpShape.Binary:
            ctx.node.connect(op.in2, self.process_expression(e.args[1], ctx))
        return op.as_rhs

    def unknown_expression(self, e: ir.Expression, ctx: _ModuleContext) -> str:
        self.sess.log.warning(f'unhandled expression {e} in {ctx.module.name}')
        return UNKNOWN_EXPR
