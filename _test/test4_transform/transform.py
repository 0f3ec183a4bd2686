import os
import tempfile

from hglviz.tester import * 
from hglviz.config import conf, CIRCUIT
from hglviz.parser import parse_string
from hglviz.visualizer import VisualizerTransform, Session, show, visualize
from hglviz.__main__ import main, _depth_directive


text = """
circuit Top :
  module Top :
    input a : UInt<8>
    input b : UInt<8>
    output c : UInt<9>
    c <= add(a, b)
"""


def _write(directory: str) -> str:
    filename = os.path.join(directory, 'Top.lo.fir')
    with open(filename, 'w') as f:
        f.write(text)
    return filename


@tester 
def test_execute(self):
    build_dir = tempfile.mkdtemp()
    t = VisualizerTransform(Session(build_dir=build_dir))
    self.EQ += t.execute(parse_string(text), []), None 
    self.EQ += os.listdir(build_dir), []

    path = t.execute(parse_string(text), [conf.depth(CIRCUIT), conf.dot_program('none'), conf.open_program('none')])
    self.EQ += path, os.path.join(os.path.abspath(build_dir), 'Top.dot')
    self.EQ += (t.dot_program, t.open_program), ('none', 'none')
    with open(path) as f:
        src = f.read()
    self.Assert(src.startswith('digraph Top {'))
    self.AssertIn('Top_add_0:out -> Top_c', src)
    self.Assert(not os.path.exists(path + '.png'))

    self.EQ += show(path, 'none', 'open'), None


@tester 
def test_show_program(self):
    directory = tempfile.mkdtemp()
    path = os.path.join(directory, 'Top.dot')
    with open(path, 'w') as f:
        f.write('digraph Top {}')
    # not a layout engine name, run as a command line instead of being rejected
    self.AssertRaises(FileNotFoundError, show, path, os.path.join(directory, 'no-such-dot'), 'none')

    if os.name == 'posix':
        program = os.path.join(directory, 'fake-dot')
        with open(program, 'w') as f:
            f.write('#!/bin/sh\ntouch "$3.png"\n')
        os.chmod(program, 0o755)
        self.EQ += show(path, program, 'none'), path + '.png'
        self.Assert(os.path.isfile(path + '.png'))


@tester 
def test_visualize(self):
    filename = relative_path('Adder.lo.fir', check_exist=True)
    build_dir = os.path.join(tempfile.mkdtemp(), 'build')
    path = visualize(filename, 'none', 'none', build_dir=build_dir)
    self.EQ += path, os.path.join(build_dir, 'Adder.dot')
    with open(path) as f:
        src = f.read()
    self.AssertIn('subgraph cluster_Adder_ha {', src)
    self.AssertIn('Adder_ha_xor_0:out -> Adder_ha_s', src)
    self.AssertIn('Adder_ha_c -> Adder_carry_r:in', src)

    # the instance keeps its ports only
    path = visualize(filename, 'none', 'none', [conf.depth('Adder', 0)], build_dir=build_dir, verbose_scope=True)
    with open(path) as f:
        src = f.read()
    self.AssertIn('Adder_ha_s [label=s shape=rectangle]', src)
    self.Assert('xor' not in src)


@tester 
def test_cli(self):
    self.EQ += main([]), 1
    directory = tempfile.mkdtemp()
    filename = _write(directory)
    self.EQ += main([filename, 'none', 'none', '--build-dir', directory, '--depth', '*=1']), 0 
    self.Assert(os.path.isfile(os.path.join(directory, 'Top.dot')))

    self.EQ += _depth_directive('Top=2'), 'Top:Depth=2'
    self.EQ += _depth_directive('*=-1'), '*:Depth=-1'
    self.AssertRaises(ValueError, _depth_directive, 'Top')
    self.AssertRaises(ValueError, _depth_directive, '=2')
