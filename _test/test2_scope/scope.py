from hglviz.tester import * 
from hglviz.config import conf, CIRCUIT
from hglviz.visualizer import Scope, get_scope


@tester 
def test_flags(self):
    def flags(*args):
        s = Scope(*args)
        return s.do_ports, s.do_components
    
    self.EQ += flags(), (True, True)
    self.EQ += flags(7, -1), (True, True)
    self.EQ += flags(0, 0), (True, False)
    self.EQ += flags(1, 0), (False, False)
    self.EQ += flags(0, 1), (True, True)
    self.EQ += flags(1, 1), (True, False)
    self.EQ += flags(2, 1), (False, False)

    # an entry module is drawn in full, whatever the depth
    self.EQ += flags(0, 0, True, True), (True, True)
    self.EQ += flags(3, 0, True, True), (True, True)

    s = Scope(0, 2).descend()
    self.EQ += s.astuple(), (1, 2)
    # the level of the entry is not counted
    s = Scope(0, 0, True, True).descend()
    self.EQ += s.astuple(), (0, 0)
    self.EQ += (s.entry, s.do_ports, s.do_components), (False, True, False)
    self.EQ += s.descend().astuple(), (1, 0)
    self.Assert(s.descended)
    self.Assert(not Scope().descended)
    self.Assert(Scope().unlimited)


@tester 
def test_get_scope(self):
    # module directive restarts the scope
    self.EQ += get_scope('Alu', [conf.depth('Alu', 3)]).astuple(), (0, 3)
    self.Assert(get_scope('Alu', [conf.depth('Alu', 3)]).entry)
    self.EQ += get_scope('Alu', [conf.depth('Alu', 3)], Scope(4, 5, True)).astuple(), (0, 3)
    # module directive wins over circuit directive, wherever it is 
    directives = [conf.depth(CIRCUIT, 5), conf.depth('Alu', 1)]
    self.EQ += get_scope('Alu', directives).astuple(), (0, 1)
    # first match wins
    self.EQ += get_scope('Alu', [conf.depth('Alu', 1), conf.depth('Alu', 2)]).astuple(), (0, 1)
    
    # circuit directive applies only to the undescended default
    directives = [conf.depth(CIRCUIT, 2)]
    top = get_scope('Top', directives)
    self.EQ += top.astuple(), (0, 2)
    self.Assert(top.entry)
    sub = get_scope('Alu', directives, top)
    self.EQ += sub.astuple(), (0, 2)
    self.Assert(not sub.entry)
    self.EQ += get_scope('Reg', directives, sub).astuple(), (1, 2)

    # no directive: descend
    self.EQ += get_scope('Top', []).astuple(), (1, -1)
    self.EQ += get_scope('Top', [conf.depth('Other', 0)], Scope(1, 3, True)).astuple(), (2, 3)
    # other directives are ignored
    self.EQ += get_scope('Top', [conf.dot_program('dot'), conf.depth('Top', 0)]).astuple(), (0, 0)
