from hglviz.tester import * 
from hglviz.parser import clean_source, literal_value, parser_class, generate_parser_source, FirrtlSyntaxError


@tester 
def test_clean_source(self):
    self.EQ += clean_source('c <= add(a, b) @[Adder.scala 12:3] ; sum'), 'c <= add(a, b)\n'
    # strings keep info-like text
    line = 'printf(clk, en, "@[x] ; y")'
    self.EQ += clean_source(line), line + '\n'
    self.EQ += clean_source('FIRRTL version 1.1.0\ncircuit Top :').splitlines(), ['', 'circuit Top :']

    # annotations may span lines, following lines keep their numbers
    text = 'circuit Top : %[[{\n"a":1\n}]]\n  module Top :\n'
    self.EQ += clean_source(text).splitlines(), ['circuit Top :', '', '', '  module Top :']

    for bad in ['a # b', 'x <= "open', 'a$b <= c', 'a <= b \\']:
        self.AssertRaises(FirrtlSyntaxError, clean_source, bad)
    e = self.AssertRaises(FirrtlSyntaxError, clean_source, 'circuit Top :\n  module Top :\n    c # d\n')
    self.AssertIn('line 3', str(e))


@tester 
def test_generated_parser(self):
    source = generate_parser_source()
    self.AssertIn('class FirrtlParser(Parser):', source)
    self.AssertIn('from hglviz.parser.actions import *', source)
    # generated once
    self.Assert(parser_class() is parser_class())
    self.EQ += parser_class().__name__, 'FirrtlParser'
    # keywords are soft, signals may use them as names
    self.EQ += list(parser_class().KEYWORDS), []
    self.AssertIn('reg', parser_class().SOFT_KEYWORDS)


@tester 
def test_literal_value(self):
    self.EQ += literal_value('12'), 12 
    self.EQ += literal_value('-3'), -3
    self.EQ += literal_value('"hff"'), 255
    self.EQ += literal_value('"h-1f"'), -31
    self.EQ += literal_value('"b101"'), 5
    self.EQ += literal_value('"o17"'), 15
    self.EQ += literal_value('"d1_000"'), 1000
    big = literal_value('"h' + 'f' * 40 + '"')
    self.EQ += big, 2**160 - 1
