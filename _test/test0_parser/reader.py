from hglviz.tester import * 
from hglviz.ir import * 
from hglviz.parser import parse_string, FirrtlSyntaxError


adder = """
circuit Top :
  module Top :
    input a : UInt<8>
    input b : UInt<8>
    output c : UInt<9>

    c <= add(a, b) @[Top.scala 5:7]
"""


@tester 
def test_adder(self):
    c = parse_string(adder)
    self.EQ += c.main, 'Top'
    self.EQ += len(c.modules), 1 
    top = c.find('Top')
    self.Assert(isinstance(top, Module))
    self.EQ += [p.name for p in top.ports], ['a', 'b', 'c']
    self.EQ += [p.direction for p in top.ports], [Direction.Input, Direction.Input, Direction.Output]
    self.EQ += top.ports[2].tpe, 'UInt<9>'
    self.EQ += len(top.body.stmts), 1 
    con = top.body.stmts[0]
    self.Assert(isinstance(con, Connect))
    self.EQ += con.loc.serialize(), 'c'
    self.Assert(isinstance(con.expr, DoPrim))
    self.EQ += con.expr.op, 'add'
    self.EQ += [i.serialize() for i in con.expr.args], ['a', 'b']
    self.EQ += c.find('Nope'), None


@tester 
def test_statements(self):
    text = """
FIRRTL version 1.1.0
circuit Top : %[[{"class":"firrtl.transforms.DontTouchAnnotation","target":"~Top|Top>r"}]]
  module Top :
    input clock : Clock
    input reset : UInt<1>
    input io : {a : UInt<1>, flip b : UInt<2>}
    output o : UInt<8>

    wire w : UInt<8> ; comment
    reg r : UInt<8>, clock with :
      reset => (reset, UInt<8>("h0"))
    reg r2 : SInt<4>, clock with : (reset => (reset, SInt<4>(-3)))
    reg r3 : UInt<1>, clock
    node n = bits(w, 7, 0)
    inst sub of Sub
    mem m :
      data-type => UInt<8>
      depth => 16
      read-latency => 0
      write-latency => 1
      reader => rd
      writer => wr
      read-under-write => undefined
    when io.a :
      w <= UInt(1)
    else :
      w <= UInt(2)
      skip
    m.rd.addr <= w
    o <= mux(reset, validif(io.a, r), m.rd.data)
    sub.x <- w
    o is invalid
    skip
    printf(clock, UInt<1>(1), "w=%d\\n", w) : print_0
    stop(clock, reset, 1)
  extmodule Sub :
    input x : UInt<8>
    defname = SubBlackBox
    parameter WIDTH = 8
"""
    c = parse_string(text)
    self.EQ += [m.name for m in c.modules], ['Top', 'Sub']
    top, sub = c.modules 
    self.EQ += top.ports[2].tpe, '{a : UInt<1>, flip b : UInt<2>}'
    
    stmts = top.body.stmts
    kinds = [type(s).__name__ for s in stmts]
    self.EQ += kinds, [
        'DefWire', 'DefRegister', 'DefRegister', 'DefRegister', 'DefNode', 'DefInstance', 
        'DefMemory', 'Conditionally', 'Connect', 'Connect', 'PartialConnect', 'IsInvalid', 
        'EmptyStmt', 'Print', 'Stop',
    ]
    r, r2, r3 = stmts[1:4]
    self.EQ += r.tpe, 'UInt<8>'
    self.EQ += r.clock.serialize(), 'clock'
    self.EQ += r.reset.serialize(), 'reset'
    self.Assert(isinstance(r.init, UIntLiteral))
    self.EQ += r.init.value, 0 
    self.Assert(isinstance(r2.init, SIntLiteral))
    self.EQ += r2.init.value, -3
    self.EQ += r2.init.width, 4
    self.EQ += r3.reset, None 

    node = stmts[4]
    self.EQ += node.value.op, 'bits'
    self.EQ += node.value.consts, [7, 0]
    self.EQ += stmts[5].module, 'Sub'

    mem = stmts[6]
    self.EQ += (mem.data_type, mem.depth, mem.read_latency, mem.write_latency), ('UInt<8>', 16, 0, 1)
    self.EQ += (mem.readers, mem.writers, mem.readwriters), (['rd'], ['wr'], [])

    when = stmts[7]
    self.EQ += when.pred.serialize(), 'io.a'
    self.EQ += len(when.conseq.stmts), 1
    self.EQ += len(when.alt.stmts), 2

    self.EQ += stmts[8].loc.serialize(), 'm.rd.addr'
    mux = stmts[9].expr 
    self.Assert(isinstance(mux, Mux))
    self.Assert(isinstance(mux.tval, ValidIf))
    self.EQ += mux.fval.serialize(), 'm.rd.data'
    self.EQ += stmts[13].string, 'w=%d\\n'
    self.EQ += stmts[14].ret, 1

    self.Assert(isinstance(sub, ExtModule))
    self.EQ += sub.defname, 'SubBlackBox'
    self.EQ += sub.params, {'WIDTH': '8'}


@tester 
def test_accessors(self):
    text = """
circuit Top :
  module Top :
    output o : UInt<1>
    o <= io.in[3].bits
    o <= v[i]
    o <= else_when
"""
    stmts = parse_string(text).modules[0].body.stmts
    e = stmts[0].expr 
    self.Assert(isinstance(e, SubField))
    self.Assert(isinstance(e.expr, SubIndex))
    self.EQ += e.serialize(), 'io.in[3].bits'
    self.Assert(isinstance(stmts[1].expr, SubAccess))
    self.EQ += stmts[1].expr.serialize(), 'v[i]'
    self.Assert(isinstance(stmts[2].expr, Reference))


@tester 
def test_else_when(self):
    text = """
circuit Top :
  module Top :
    input a : UInt<1>
    output o : UInt<1>
    when a :
      o <= UInt(1)
    else when not(a) :
      o <= UInt(0)
"""
    stmts = parse_string(text).modules[0].body.stmts
    self.EQ += len(stmts), 1 
    alt = stmts[0].alt.stmts
    self.EQ += len(alt), 1 
    self.Assert(isinstance(alt[0], Conditionally))
    self.EQ += alt[0].pred.serialize(), 'not(a)'


@tester 
def test_signal_named_as_keyword(self):
    text = """
circuit Top :
  module Top :
    input reg : UInt<1>
    output node : UInt<1>
    node <= reg
"""
    stmts = parse_string(text).modules[0].body.stmts
    self.Assert(isinstance(stmts[0], Connect))
    self.EQ += stmts[0].loc.serialize(), 'node'


@tester 
def test_errors(self):
    bad = [
        "module Top :\n  skip\n",
        "circuit Top :\n  module Top :\n    c <=\n",
        "circuit Top :\n  module Top :\n    c # d\n",
        "circuit Top :\n  module Top :\n    frob c\n",
        "circuit Top :\n  module Top :\n    mem m :\n      color => red\n",
        "",
        # unclosed parenthesis, python tokenizer error
        "circuit Top :\n  module Top :\n    c <= add(a,\n",
        # dedent to no outer level
        "circuit Top :\n    module Top :\n      skip\n   skip\n",
    ]
    for text in bad:
        self.AssertRaises(FirrtlSyntaxError, parse_string, text)
    e = self.AssertRaises(FirrtlSyntaxError, parse_string, "circuit Top :\n  module Top :\n    c <=\n")
    self.AssertIn('line 3', str(e))


@tester 
def test_serialize_roundtrip(self):
    c = parse_string(adder)
    again = parse_string(c.serialize())
    self.EQ += again.serialize(), c.serialize()
    self.EQ += UIntLiteral(255, 8).serialize(), 'UInt<8>("hff")'
    self.EQ += SIntLiteral(-3).serialize(), 'SInt("h-3")'


@tester 
def test_serialize_statements(self):
    text = """
circuit Top :
  module Top :
    input clock : Clock
    input reset : UInt<1>
    input io : {a : UInt<1>, flip b : UInt<2>[4]}
    output o : UInt<8>
    wire w : UInt<8>
    reg r : UInt<8>, clock with : (reset => (reset, UInt<8>("h0")))
    reg r3 : UInt<1>, clock
    node n = bits(w, 7, 0)
    inst sub of Sub
    mem m :
      data-type => UInt<8>
      depth => 16
      read-latency => 0
      write-latency => 1
      reader => rd
      readwriter => rw
      read-under-write => old
    when io.a :
      w <= SInt<4>(-3)
    else :
      when io.b[0] :
        w <= validif(reset, r)
    m.rd.addr <= w
    o <= mux(reset, r, m.rd.data)
    sub.x <- w
    o is invalid
    skip
    printf(clock, UInt<1>(1), "w=%d", w)
    stop(clock, reset, 1)
    attach(io.a, w)
  extmodule Sub :
    input x : UInt<8>
    defname = SubBlackBox
    parameter WIDTH = 8
"""
    c = parse_string(text)
    again = parse_string(c.serialize())
    self.EQ += again.serialize(), c.serialize()
    top = again.find('Top')
    self.EQ += top.ports[2].tpe, '{a : UInt<1>, flip b : UInt<2>[4]}'
    mem = top.body.stmts[5]
    self.EQ += (mem.readers, mem.readwriters, mem.read_under_write), (['rd'], ['rw'], 'old')
    self.EQ += [type(i).__name__ for i in top.body.stmts[-3:]], ['Print', 'Stop', 'Attach']
