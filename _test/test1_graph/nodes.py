import graphviz

from hglviz.tester import * 
from hglviz.graph import * 
from hglviz.visualizer import NameTable
from hglviz.ir import DefMemory


@tester 
def test_names(self):
    self.EQ += dot_name('io.in[0]'), 'io_in_0_'
    self.EQ += dot_name('a_b'), 'a_b'
    top = ModuleNode('Top')
    sub = ModuleNode('alu', top)
    port = PortNode('io.out', sub)
    self.EQ += top.absolute_name, 'Top'
    self.EQ += sub.absolute_name, 'Top_alu'
    self.EQ += port.absolute_name, 'Top_alu_io_out'
    self.EQ += port.in_, port.as_rhs 


@tester 
def test_terminals(self):
    top = ModuleNode('Top')
    r = RegisterNode('r', top)
    self.EQ += r.in_, 'Top_r:in'
    self.EQ += r.as_rhs, 'Top_r'

    add = BinaryOpNode('add_0', 'add', top)
    self.EQ += (add.in_, add.in1, add.in2, add.as_rhs), ('Top_add_0:in1', 'Top_add_0:in1', 'Top_add_0:in2', 'Top_add_0:out')
    
    mux = MuxNode('mux_1', top)
    self.EQ += (mux.select, mux.in1, mux.in2), ('Top_mux_1:select', 'Top_mux_1:in1', 'Top_mux_1:in2')
    v = ValidIfNode('validif_2', top)
    self.EQ += v.select, 'Top_validif_2:select'

    self.EQ += OneArgOneParamOpNode('shl_3', 'shl', 2, top).label, 'shl(2)'
    self.EQ += OneArgTwoParamOpNode('bits_4', 'bits', 7, 0, top).label, 'bits(7, 0)'
    self.EQ += LiteralNode('lit0', 255, top).label, '255'


@tester 
def test_module_node(self):
    top = ModuleNode('Top')
    a = top.add_child(PortNode('a', top))
    sub = ModuleNode('sub', top)
    top += sub 
    sub += NodeNode('w', sub)
    top.connect(sub.children[0].in_, a.as_rhs)
    sub.connect('Top_sub_w', 'Top_sub_x')

    self.EQ += [i.absolute_name for i in top.iter_nodes()], ['Top_a', 'Top_sub_w']
    self.EQ += [i.absolute_name for i in top.iter_nodes(recursive=False)], ['Top_a']
    self.EQ += list(top.iter_edges()), [('Top_a', 'Top_sub_w'), ('Top_sub_x', 'Top_sub_w')]
    self.EQ += list(top.iter_edges(recursive=False)), [('Top_a', 'Top_sub_w')]
    self.EQ += list(top.submodules()), [sub]
    # per-container counters
    self.EQ += [top.new_name('mux'), top.new_name('add'), sub.new_name('mux')], ['mux_0', 'add_1', 'mux_0']
    # names of the module are skipped, in their dot form
    sub.reserve('mux_2', 'io.x')
    self.Assert(sub.is_taken('io_x') and sub.is_taken('w'))
    self.EQ += [sub.new_name('mux'), sub.new_name('mux')], ['mux_1', 'mux_3']


@tester 
def test_name_table(self):
    top = ModuleNode('Top')
    t = NameTable()
    r = RegisterNode('r', top)
    t.declare('r', r)
    self.Assert('r' in t)
    self.EQ += t.get('r'), r 
    self.EQ += t.get('x'), None 
    self.EQ += t.resolve('r', 'Top_r_fallback'), 'Top_r'
    self.EQ += t.resolve('x', 'Top_x'), 'Top_x'
    r2 = RegisterNode('r2', top)
    t.declare('r', r2)
    self.EQ += t.get('r'), r2 
    self.EQ += len(t), 1


@tester 
def test_memory(self):
    top = ModuleNode('Top')
    t = NameTable() 
    mem = DefMemory('m', 'UInt<8>', 16, readers=['r'], writers=['w'], readwriters=['rw'])
    node = MemoryNode('m', top, 'core.m', mem, t)
    self.EQ += len(t), 4 + 5 + 7
    self.EQ += t.get('core.m.r.addr').in_, 'Top_m:r_addr'
    self.EQ += t.resolve('core.m.r.data', ''), 'Top_m:r_data'
    self.EQ += t.get('core.m.rw.wmode').in_, 'Top_m:rw_wmode'
    self.Assert('core.m.w.mask' in t)
    self.Assert('core.m.r.mask' not in t)
    self.EQ += [(kind, name) for kind, name, _ in node.ports], [('read', 'r'), ('write', 'w'), ('readwrite', 'rw')]


@tester 
def test_render(self):
    top = ModuleNode('Top')
    sub = ModuleNode('sub', top)
    top += PortNode('a', top)
    top += RegisterNode('r', top)
    top += BinaryOpNode('add_0', 'add', top)
    top += sub
    sub += NodeNode('w', sub)
    top.connect('Top_add_0:in1', 'Top_a')
    top.connect('Top_r:in', 'Top_add_0:out')
    
    g = graphviz.Digraph('Top')
    top.render(g)
    src = g.source 
    self.AssertIn('subgraph cluster_Top {', src)
    self.AssertIn('subgraph cluster_Top_sub {', src)
    self.AssertIn('Top_a [label=a shape=rectangle]', src)
    self.AssertIn('Top_sub_w [label=w shape=ellipse]', src)
    self.AssertIn('shape=Mrecord', src)
    self.AssertIn('<TD ROWSPAN="2" PORT="out">add</TD>', src)
    self.AssertIn('Top_a -> Top_add_0:in1', src)
    self.AssertIn('Top_add_0:out -> Top_r:in', src)
    # nested cluster is closed before the parent's edges
    self.Assert(src.index('cluster_Top_sub') < src.index('Top_a -> Top_add_0:in1'))
