####################################################################################################
#
# hglviz - Graphviz rendering of hierarchical hardware circuits
# Copyright (C) 2022 Jintao Sun
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
####################################################################################################


from __future__ import annotations
from typing import Iterable, List, Optional

import subprocess

import graphviz

import hglviz.ir as ir
import hglviz.tester.utils as tester_utils
from hglviz._hgl import HGL
from hglviz.config import CIRCUIT, Directive, conf, split_directives
from hglviz.parser import parse_file
from hglviz.visualizer._session import Session
from hglviz.visualizer.translator import VisualizerPass


def show(filename: str, dot_program: str = 'dot', open_program: str = 'open') -> Optional[str]:
    """ `<dot_program> -Tpng -O <filename>`, then `<open_program> <filename>.png` 

    'none' disables a step; failures of the programs are raised as is
    """
    if dot_program == Directive.Disabled:
        return None
    if dot_program in graphviz.ENGINES:
        png = graphviz.render(engine=dot_program, format='png', filepath=filename)
    else:
        # any other program taking the dot command line, ex. a full path to dot
        subprocess.run([dot_program, '-Tpng', '-O', filename], check=True)
        png = f'{filename}.png'
    if open_program != Directive.Disabled:
        subprocess.run([open_program, png], check=True)
    return png


class VisualizerTransform(HGL):
    """ split directives, write the dot file, then draw and open it
    """

    __slots__ = 'dot_program', 'open_program', 'sess'

    def __init__(self, session: Optional[Session] = None) -> None:
        self.dot_program = 'dot' 
        self.open_program = 'open'
        self.sess: Session = session if session is not None else Session()

    def execute(self, circuit: ir.Circuit, directives: Iterable[Directive]) -> Optional[str]:
        """ return path of the dot file, None if there is no directive at all
        """
        directives = list(directives)
        if not directives:
            return None
        scopes, self.dot_program, self.open_program = split_directives(
            directives, self.dot_program, self.open_program
        )
        #-----------------------
        if self.sess.verbose_scope:
            self.sess.print(f"directives: {', '.join(d.serialize() for d in scopes)}")
            self.sess.print(f'dot: {self.dot_program}, open: {self.open_program}')
        #-----------------------
        filename = VisualizerPass(scopes, self.sess).run(circuit)
        show(filename, self.dot_program, self.open_program)
        return filename


def visualize(
    filename: str, 
    dot_program: str = 'fdp', 
    open_program: str = 'open', 
    directives: Iterable[Directive] = (),
    **kwargs
) -> Optional[str]:
    """ render a low form circuit file, return path of the dot file 

    directives default to the whole circuit, unlimited depth 
    kwargs: options of `Session`
    """
    circuit = parse_file(filename)
    directives = list(directives) or [conf.depth(CIRCUIT)]
    directives += [conf.dot_program(dot_program), conf.open_program(open_program)]
    sess = Session(**kwargs)
    ret = VisualizerTransform(sess).execute(circuit, directives)
    if sess.log:
        print(sess.log)
    return ret
