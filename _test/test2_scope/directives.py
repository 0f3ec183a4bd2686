from hglviz.tester import * 
from hglviz.config import * 


@tester 
def test_constructors(self):
    d = conf.depth('Top', 2)
    self.Assert(d.is_scope)
    self.EQ += (d.target, d.key, d.max_depth), ('Top', Directive.Depth, 2)
    self.Assert(d.matches('Top'))
    self.Assert(not d.matches('Alu'))

    d = conf.depth()
    self.Assert(d.target is CIRCUIT)
    self.EQ += d.max_depth, -1 
    self.Assert(not d.matches('Top'))
    self.EQ += d.serialize(), '*:Depth=-1'
    
    p = conf.dot_program('fdp')
    self.Assert(not p.is_scope)
    self.EQ += p.serialize(), '*:DotProgram=fdp'
    self.EQ += conf.open_program('none').value, Directive.Disabled


@tester 
def test_parse(self):
    self.EQ += Directive.parse('Top:Depth=2'), conf.depth('Top', 2)
    self.EQ += Directive.parse('*:Depth=-1'), conf.depth(CIRCUIT, -1)
    self.EQ += Directive.parse(' Depth = 0 '), conf.depth(CIRCUIT, 0)
    self.EQ += Directive.parse('DotProgram=dot'), conf.dot_program('dot')
    self.EQ += Directive.parse('OpenProgram=none'), conf.open_program('none')
    for d in [conf.depth('Alu', 3), conf.depth(), conf.dot_program('neato')]:
        self.EQ += Directive.parse(d.serialize()), d

    for s in ['Top', 'Top:Depth=x', 'Top:Color=red', '']:
        self.AssertRaises(ValueError, Directive.parse, s)
    self.AssertRaises(ValueError, Directive, 'Top', 'Color', 'red')


@tester 
def test_split(self):
    directives = [
        conf.dot_program('fdp'),
        conf.depth('Top', 1),
        conf.open_program('none'),
        conf.depth(CIRCUIT, 2),
        conf.dot_program('neato'),
    ]
    scopes, dot, open_ = split_directives(directives)
    self.EQ += scopes, [conf.depth('Top', 1), conf.depth(CIRCUIT, 2)]
    self.EQ += (dot, open_), ('neato', 'none')
    self.EQ += split_directives([])[1:], ('dot', 'open')
    self.EQ += split_directives([], 'fdp', 'xdg-open')[1:], ('fdp', 'xdg-open')
