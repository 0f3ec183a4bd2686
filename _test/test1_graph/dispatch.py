from typing import Any

from hglviz.tester import * 
from hglviz.dispatch import Dispatcher, singleton
from hglviz import ir


@tester 
def test_dispatch(self):
    d = Dispatcher()
    d.dispatch('expr', lambda e: 'ref', ir.Reference)
    d.dispatch('expr', lambda e: 'lit', [ir.UIntLiteral, ir.SIntLiteral])
    self.EQ += d.call('expr', ir.Reference('a')), 'ref'
    self.EQ += d.call('expr', ir.SIntLiteral(-1)), 'lit'
    self.AssertRaises(TypeError, d.call, 'expr', ir.Mux(ir.Reference('s'), ir.Reference('a'), ir.Reference('b')))

    d.default('expr', lambda e: 'other')
    self.EQ += d.call('expr', ir.ValidIf(ir.Reference('s'), ir.Reference('a'))), 'other'

    # later registrations win, subclasses match their bases
    d.dispatch('expr', lambda e: 'literal', ir.Literal)
    self.EQ += d.call('expr', ir.UIntLiteral(1)), 'literal'
    
    d.dispatch('stmt', lambda s: 'connect', ir.Connect)
    self.EQ += d.call('stmt', ir.PartialConnect(ir.Reference('a'), ir.Reference('b'))), 'connect'

    self.AssertRaises(TypeError, d.call, 'stmt', ir.EmptyStmt())
    d.dispatch('stmt', lambda s: 'any', Any)
    self.EQ += d.call('stmt', ir.EmptyStmt()), 'any'
    self.EQ += d.call('stmt', ir.Stop(ir.Reference('c'), ir.Reference('e'))), 'any'
    # tables are built once per pass, never merged
    self.Assert(not hasattr(d, 'copy') and not hasattr(d, 'update'))


@tester 
def test_singleton(self):
    @singleton 
    class unit:
        def __str__(self):
            return 'unit'
    self.EQ += str(unit), 'unit'
