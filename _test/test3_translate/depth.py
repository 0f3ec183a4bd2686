from hglviz.tester import * 
from hglviz.graph import * 
from hglviz.config import conf, CIRCUIT
from hglviz.parser import parse_string
from hglviz.visualizer import VisualizerPass, Session


hierarchy = """
circuit Top :
  module Leaf :
    input x : UInt<1>
    output y : UInt<1>
    y <= not(x)
  module Child :
    input i : UInt<1>
    output o : UInt<1>
    wire t : UInt<1>
    inst leaf of Leaf
    leaf.x <= i
    t <= leaf.y
    o <= t
  module Top :
    input a : UInt<1>
    output y : UInt<1>
    output z : UInt<1>
    inst c1 of Child
    inst c2 of Child
    c1.i <= a
    c2.i <= a
    y <= c1.o
    z <= c2.o
"""


def build(directives=()):
    sess = Session()
    root = VisualizerPass(directives, sess).build(parse_string(hierarchy))
    return root, sess


def names(m: ModuleNode):
    return [i.name for i in m.children]


@tester 
def test_siblings(self):
    root, sess = build([conf.depth()])
    c1, c2 = root.submodules()
    self.EQ += (c1.absolute_name, c2.absolute_name), ('Top_c1', 'Top_c2')
    self.EQ += list(c1.iter_edges(recursive=False)), [
        ('Top_c1_i', 'Top_c1_leaf_x'),
        ('Top_c1_leaf_y', 'Top_c1_t'),
        ('Top_c1_t', 'Top_c1_o'),
    ]
    self.EQ += list(c2.iter_edges(recursive=False)), [
        ('Top_c2_i', 'Top_c2_leaf_x'),
        ('Top_c2_leaf_y', 'Top_c2_t'),
        ('Top_c2_t', 'Top_c2_o'),
    ]
    self.EQ += list(root.iter_edges(recursive=False)), [
        ('Top_a', 'Top_c1_i'),
        ('Top_a', 'Top_c2_i'),
        ('Top_c1_o', 'Top_y'),
        ('Top_c2_o', 'Top_z'),
    ]
    self.EQ += sess.names.get('c1.t').absolute_name, 'Top_c1_t'
    self.EQ += sess.names.get('c2.t').absolute_name, 'Top_c2_t'
    self.EQ += sess.names.get('c2.leaf.y').absolute_name, 'Top_c2_leaf_y'
    # every node name is unique
    all_names = [i.absolute_name for i in root.iter_nodes()]
    self.EQ += len(all_names), len(set(all_names))
    self.EQ += sess.n_modules, 5


@tester 
def test_unlimited(self):
    for directives in ([], [conf.depth()], [conf.depth('Top', -1)]):
        root, _ = build(directives)
        c1, c2 = root.submodules()
        self.EQ += names(c1), ['i', 'o', 't', 'leaf']
        leaf, = c1.submodules()
        self.EQ += names(leaf), ['x', 'y', 'not_0']


@tester 
def test_circuit_depth(self):
    # 0: the top itself, ports of its instances 
    root, _ = build([conf.depth(CIRCUIT, 0)])
    self.EQ += names(root), ['a', 'y', 'z', 'c1', 'c2']
    self.EQ += [names(m) for m in root.submodules()], [['i', 'o', 'leaf'], ['i', 'o', 'leaf']]
    c1, c2 = root.submodules()
    self.EQ += list(c1.iter_edges(recursive=False)), []
    leaf, = c1.submodules()
    self.EQ += names(leaf), []
    self.EQ += len(list(root.iter_nodes())), 7
    self.EQ += len(list(root.iter_edges())), 4

    # 1: instances expanded, ports of their instances 
    root, _ = build([conf.depth(CIRCUIT, 1)])
    c1, c2 = root.submodules()
    self.EQ += names(c1), ['i', 'o', 't', 'leaf']
    leaf, = c1.submodules()
    self.EQ += names(leaf), ['x', 'y']
    self.EQ += list(leaf.iter_edges(recursive=False)), []

    # 2: everything in this hierarchy 
    root, _ = build([conf.depth(CIRCUIT, 2)])
    c1, c2 = root.submodules()
    leaf, = c1.submodules()
    self.EQ += names(leaf), ['x', 'y', 'not_0']


@tester 
def test_module_depth(self):
    # every Child in full, ports of its Leaf
    root, _ = build([conf.depth('Child', 0)])
    for m in root.submodules():
        self.EQ += names(m), ['i', 'o', 't', 'leaf']
        leaf, = m.submodules()
        self.EQ += names(leaf), ['x', 'y']
        self.EQ += list(leaf.iter_edges(recursive=False)), []
    self.EQ += len(list(root.iter_edges())), 10

    # Leaf restarts at its own directive inside a shallow Child
    root, _ = build([conf.depth('Leaf', -1), conf.depth(CIRCUIT, 0)])
    c1, _ = root.submodules()
    self.EQ += names(c1), ['i', 'o', 'leaf']
    leaf, = c1.submodules()
    self.EQ += names(leaf), ['x', 'y', 'not_0']

    # a directive of the top does not limit the top
    root, _ = build([conf.depth('Top', 0)])
    self.EQ += names(root), ['a', 'y', 'z', 'c1', 'c2']
    self.EQ += len(root.edges), 4
    c1, _ = root.submodules()
    self.EQ += names(c1), ['i', 'o', 'leaf']
    leaf, = c1.submodules()
    self.EQ += names(leaf), []


single = """
circuit Top :
  module Child :
    input clock : Clock
    input i : UInt<4>
    output o : UInt<4>
    wire t : UInt<4>
    reg r : UInt<4>, clock
    t <= add(i, UInt<4>(1))
    r <= t
    o <= r
  module Top :
    input clock : Clock
    input a : UInt<4>
    output y : UInt<4>
    inst c1 of Child
    c1.clock <= clock
    c1.i <= a
    y <= c1.o
"""


@tester 
def test_depth_zero_keeps_ports(self):
    # depth 0 on a module with one instance: nothing inside the instance, its ports stay
    for directives in ([conf.depth('Top', 0)], [conf.depth(CIRCUIT, 0)]):
        root = VisualizerPass(directives, Session()).build(parse_string(single))
        c1, = root.submodules()
        self.EQ += names(c1), ['clock', 'i', 'o']
        self.EQ += c1.edges, []
        self.EQ += [i.name for i in root.children], ['clock', 'a', 'y', 'c1']
        self.EQ += len(root.edges), 3


memory = """
circuit Top :
  module Child :
    input clock : Clock
    input i : UInt<4>
    output o : UInt<4>
    wire t : UInt<4>
    reg r : UInt<4>, clock
    mem m :
      data-type => UInt<4>
      depth => 16
      read-latency => 0
      write-latency => 1
      reader => r
      read-under-write => undefined
    m.r.addr <= i
    t <= m.r.data
    r <= t
    o <= r
  module Top :
    input clock : Clock
    input a : UInt<4>
    output y : UInt<4>
    inst c1 of Child
    c1.i <= a
    y <= c1.o
"""


@tester 
def test_memory_any_depth(self):
    for directives in ([conf.depth(CIRCUIT, 0)], [conf.depth('Top', 0)]):
        sess = Session()
        root = VisualizerPass(directives, sess).build(parse_string(memory))
        c1, = root.submodules()
        self.EQ += names(c1), ['clock', 'i', 'o', 'm']
        self.Assert(isinstance(c1.children[-1], MemoryNode))
        self.AssertIn('c1.m.r.addr', sess.names)
        self.EQ += sess.names.get('c1.m.r.data').absolute_name, 'Top_c1_m:r_data'
        # wires and registers are left out
        self.Assert('c1.t' not in sess.names and 'c1.r' not in sess.names)
        self.EQ += c1.edges, []

    # within the scope the memory is connected like any node
    sess = Session()
    root = VisualizerPass([conf.depth(CIRCUIT, 1)], sess).build(parse_string(memory))
    c1, = root.submodules()
    self.EQ += names(c1), ['clock', 'i', 'o', 't', 'r', 'm']
    self.AssertIn(('Top_c1_i', 'Top_c1_m:r_addr'), c1.edges)
    self.AssertIn(('Top_c1_m:r_data', 'Top_c1_t'), c1.edges)
