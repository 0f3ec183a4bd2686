from hglviz.tester import * 
from hglviz import ir
from hglviz.graph import * 
from hglviz.parser import parse_string
from hglviz.visualizer import VisualizerPass, Session, VisualizerError, PLACEHOLDER_OP, UNKNOWN_EXPR, BAD_NAME


def _top(*stmts, ports=('a', 'b', 'c')):
    inputs = [ir.Port(i, ir.Direction.Input, 'UInt<4>') for i in ports[:-1]]
    output = [ir.Port(ports[-1], ir.Direction.Output, 'UInt<4>')]
    return ir.Circuit('Top', [ir.Module('Top', inputs + output, ir.Block(stmts))])


A, B, C = ir.Reference('a'), ir.Reference('b'), ir.Reference('c')


@tester 
def test_unsupported_op(self):
    circuit = _top(
        ir.Connect(C, ir.DoPrim('asClock', [A])),
        ir.Connect(C, ir.DoPrim('add', [A, B])),
        ir.Connect(C, ir.DoPrim('bits', [A], [3])),
    )
    sess = Session()
    root = VisualizerPass(session=sess).build(circuit)
    edges = list(root.iter_edges())
    self.EQ += edges[0], (PLACEHOLDER_OP, 'Top_c')
    self.EQ += edges[-1], (PLACEHOLDER_OP, 'Top_c')
    self.AssertIn(('Top_add_0:out', 'Top_c'), edges)
    self.EQ += len(sess.log), 2


@tester 
def test_unknown_expression(self):
    circuit = _top(ir.Connect(C, ir.SubAccess(A, B)))
    sess = Session()
    root = VisualizerPass(session=sess).build(circuit)
    self.EQ += list(root.iter_edges()), [(UNKNOWN_EXPR, 'Top_c')]
    self.EQ += len(sess.log), 1


@tester 
def test_bad_sink(self):
    bad = ir.Connect(ir.DoPrim('add', [A, B]), A)
    sess = Session()
    root = VisualizerPass(session=sess).build(_top(bad))
    self.EQ += list(root.iter_edges()), [('Top_a', BAD_NAME)]
    self.EQ += len(sess.log), 1

    e = self.AssertRaises(VisualizerError, VisualizerPass(session=Session(strict=True)).build, _top(bad))
    self.AssertIn('bad connect', str(e))


@tester 
def test_undeclared(self):
    # references to undeclared names fall back to the expanded name
    circuit = _top(ir.Connect(C, ir.SubField(ir.Reference('io'), 'x')), ir.Connect(ir.Reference('w'), A))
    root = VisualizerPass().build(circuit)
    self.EQ += list(root.iter_edges()), [('Top_io_x', 'Top_c'), ('Top_a', 'Top_w')]


@tester 
def test_ignored(self):
    circuit = _top(
        ir.IsInvalid(C),
        ir.EmptyStmt(),
        ir.Stop(A, B, 1),
        ir.Print(A, B, 'x', [C]),
        ir.Attach([A, B]),
        ir.Conditionally(A, ir.Block([ir.Connect(C, B)])),
    )
    sess = Session()
    root = VisualizerPass(session=sess).build(circuit)
    self.EQ += len(list(root.iter_nodes())), 3
    self.EQ += list(root.iter_edges()), []
    self.EQ += len(sess.log), 0


@tester 
def test_partial_connect(self):
    root = VisualizerPass().build(_top(ir.PartialConnect(C, A)))
    self.EQ += list(root.iter_edges()), [('Top_a', 'Top_c')]


@tester 
def test_missing_modules(self):
    circuit = ir.Circuit('Main', [ir.Module('Top')])
    e = self.AssertRaises(VisualizerError, VisualizerPass().build, circuit)
    self.AssertIn('Main', str(e))

    circuit = _top(ir.DefInstance('u', 'Nowhere'), ir.Connect(ir.SubField(ir.Reference('u'), 'x'), A))
    sess = Session()
    root = VisualizerPass(session=sess).build(circuit)
    u, = root.submodules()
    self.EQ += u.children, []
    self.EQ += list(root.iter_edges()), [('Top_a', 'Top_u_x')]
    self.EQ += len(sess.log), 1
    self.AssertIn('n_warnings: 1', str(sess))
    self.AssertIn('Nowhere', sess.log.warnings[0])


@tester 
def test_extmodule(self):
    text = """
circuit Top :
  extmodule BlackBox :
    input x : UInt<1>
    output y : UInt<1>
    defname = BB
  module Top :
    input a : UInt<1>
    output b : UInt<1>
    inst bb of BlackBox
    bb.x <= a
    b <= bb.y
"""
    root = VisualizerPass().build(parse_string(text))
    bb, = root.submodules()
    self.EQ += [i.name for i in bb.children], ['x', 'y']
    self.EQ += list(root.iter_edges()), [('Top_a', 'Top_bb_x'), ('Top_bb_y', 'Top_b')]
