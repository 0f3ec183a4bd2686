from hglviz.tester import * 
from hglviz.graph import * 
from hglviz.parser import parse_string
from hglviz.visualizer import VisualizerPass, Session


def build(text: str, directives=(), **kwargs):
    sess = Session(**kwargs)
    root = VisualizerPass(directives, sess).build(parse_string(text))
    return root, sess


adder = """
circuit Top :
  module Top :
    input a : UInt<8>
    input b : UInt<8>
    output c : UInt<9>
    c <= add(a, b)
"""


@tester 
def test_adder(self):
    root, sess = build(adder)
    self.EQ += root.absolute_name, 'Top'
    nodes = list(root.iter_nodes())
    self.EQ += [type(i).__name__ for i in nodes], ['PortNode', 'PortNode', 'PortNode', 'BinaryOpNode']
    self.EQ += [i.absolute_name for i in nodes], ['Top_a', 'Top_b', 'Top_c', 'Top_add_0']
    self.EQ += list(root.iter_edges()), [
        ('Top_a', 'Top_add_0:in1'), 
        ('Top_b', 'Top_add_0:in2'), 
        ('Top_add_0:out', 'Top_c'),
    ]
    self.EQ += len(sess.log), 0

    src = VisualizerPass().to_digraph(root).source 
    self.Assert(src.startswith('digraph Top {'))
    self.AssertIn('overlap=false', src)
    self.AssertIn('subgraph cluster_Top {', src)
    self.AssertIn('Top_add_0:out -> Top_c', src)
    self.Assert(src.rstrip().endswith('}'))


@tester 
def test_register(self):
    text = """
circuit Top :
  module Top :
    input clock : Clock
    input d : UInt<8>
    output q : UInt<8>
    reg r : UInt<8>, clock
    r <= add(r, d)
    q <= r
"""
    root, sess = build(text)
    edges = list(root.iter_edges())
    self.EQ += edges, [
        ('Top_r', 'Top_add_0:in1'), 
        ('Top_d', 'Top_add_0:in2'), 
        ('Top_add_0:out', 'Top_r:in'),
        ('Top_r', 'Top_q'),
    ]
    # written at `in`, read from the node itself
    self.Assert(all(sink != 'Top_r' for _, sink in edges))
    self.Assert(isinstance(sess.names.get('r'), RegisterNode))


@tester 
def test_counts(self):
    text = """
circuit Top :
  module Top :
    input clock : Clock
    input a : UInt<4>
    input s : UInt<1>
    output o : UInt<4>
    wire w : UInt<4>
    reg r : UInt<4>, clock
    node n = tail(add(a, UInt<4>(1)), 1)
    w <= mux(s, n, r)
    r <= w
    o <= bits(r, 3, 0)
    o is invalid
    skip
"""
    root, sess = build(text)
    nodes = list(root.iter_nodes())
    # 4 ports, wire, reg, node, tail, add, literal, mux, bits
    self.EQ += len(nodes), 12
    # 3 connects, 1 node, 7 operator inputs
    self.EQ += len(list(root.iter_edges())), 11
    self.EQ += [i.name for i in nodes if isinstance(i, OperatorNode)], ['tail_0', 'add_1', 'mux_2', 'bits_3']
    self.EQ += [i.label for i in nodes if isinstance(i, OperatorNode)], ['tail(1)', 'add', 'mux', 'bits(3, 0)']
    lit = [i for i in nodes if isinstance(i, LiteralNode)]
    self.EQ += [(i.name, i.label) for i in lit], [('lit0', '1')]
    edges = set(root.iter_edges())
    self.AssertIn(('Top_tail_0:out', 'Top_n'), edges)
    self.AssertIn(('Top_lit0', 'Top_add_1:in2'), edges)
    self.AssertIn(('Top_s', 'Top_mux_2:select'), edges)
    self.AssertIn(('Top_n', 'Top_mux_2:in1'), edges)
    self.AssertIn(('Top_r', 'Top_mux_2:in2'), edges)
    self.AssertIn(('Top_w', 'Top_r:in'), edges)
    self.AssertIn(('Top_bits_3:out', 'Top_o'), edges)


@tester 
def test_validif(self):
    text = """
circuit Top :
  module Top :
    input s : UInt<1>
    input a : UInt<4>
    output o : UInt<4>
    o <= validif(s, a)
"""
    root, sess = build(text)
    self.EQ += list(root.iter_edges()), [
        ('Top_s', 'Top_validif_0:select'),
        ('Top_a', 'Top_validif_0:in1'),
        ('Top_validif_0:out', 'Top_o'),
    ]


@tester 
def test_literals(self):
    text = """
circuit Top :
  module Top :
    output o : UInt<9>
    o <= add(UInt<8>(1), UInt<8>(1))
"""
    root, sess = build(text)
    lits = [i for i in root.iter_nodes() if isinstance(i, LiteralNode)]
    self.EQ += [i.absolute_name for i in lits], ['Top_lit0', 'Top_lit1']
    self.EQ += sess.n_literals, 2
    # a fresh session numbers from 0 again
    again, _ = build(text)
    self.EQ += [i.absolute_name for i in again.iter_nodes() if isinstance(i, LiteralNode)], ['Top_lit0', 'Top_lit1']


@tester 
def test_memory(self):
    text = """
circuit Top :
  module Top :
    input clock : Clock
    input raddr : UInt<4>
    input waddr : UInt<4>
    input wdata : UInt<8>
    output rdata : UInt<8>
    mem m :
      data-type => UInt<8>
      depth => 16
      read-latency => 0
      write-latency => 1
      reader => r
      writer => w
      read-under-write => undefined
    m.r.addr <= raddr
    m.r.clk <= clock
    m.w.addr <= waddr
    m.w.data <= wdata
    rdata <= m.r.data
"""
    root, sess = build(text)
    mems = [i for i in root.iter_nodes() if isinstance(i, MemoryNode)]
    self.EQ += len(mems), 1
    self.EQ += list(root.iter_edges()), [
        ('Top_raddr', 'Top_m:r_addr'),
        ('Top_clock', 'Top_m:r_clk'),
        ('Top_waddr', 'Top_m:w_addr'),
        ('Top_wdata', 'Top_m:w_data'),
        ('Top_m:r_data', 'Top_rdata'),
    ]
    src = VisualizerPass().to_digraph(root).source
    self.AssertIn('PORT="r_addr"', src)
    self.AssertIn('Top_m:r_data -> Top_rdata', src)


@tester 
def test_idempotent(self):
    text = """
circuit Top :
  module Child :
    input i : UInt<4>
    output o : UInt<4>
    o <= mux(i, UInt(1), UInt(0))
  module Top :
    input a : UInt<4>
    output y : UInt<4>
    inst c of Child
    c.i <= a
    y <= c.o
"""
    sources = []
    for _ in range(2):
        p = VisualizerPass(session=Session())
        sources.append(p.to_digraph(p.build(parse_string(text))).source)
    self.EQ += sources[0], sources[1]


@tester 
def test_synthetic_names(self):
    # signals named like generated nodes, some declared after their names are generated
    text = """
circuit Top :
  module Top :
    input a : UInt<4>
    input s : UInt<1>
    output c : UInt<4>
    wire add_0 : UInt<4>
    add_0 <= add(a, UInt<4>(1))
    wire lit0 : UInt<4>
    wire mux_2 : UInt<4>
    lit0 <= add_0
    mux_2 <= lit0
    c <= mux(s, mux_2, a)
"""
    root, sess = build(text)
    nodes = [i.absolute_name for i in root.iter_nodes()]
    self.EQ += nodes, [
        'Top_a', 'Top_s', 'Top_c', 'Top_add_0', 'Top_add_1', 'Top_lit1', 'Top_lit0', 'Top_mux_2', 'Top_mux_3',
    ]
    self.EQ += len(nodes), len(set(nodes))
    self.EQ += list(root.iter_edges()), [
        ('Top_a', 'Top_add_1:in1'),
        ('Top_lit1', 'Top_add_1:in2'),
        ('Top_add_1:out', 'Top_add_0'),
        ('Top_add_0', 'Top_lit0'),
        ('Top_lit0', 'Top_mux_2'),
        ('Top_s', 'Top_mux_3:select'),
        ('Top_mux_2', 'Top_mux_3:in1'),
        ('Top_a', 'Top_mux_3:in2'),
        ('Top_mux_3:out', 'Top_c'),
    ]
    # no node drives itself
    self.Assert(all(src.split(':')[0] != sink.split(':')[0] for src, sink in root.iter_edges()))
    self.EQ += sess.n_literals, 2
