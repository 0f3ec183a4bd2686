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


import sys
import argparse

from hglviz.config import Directive
from hglviz.visualizer import visualize


_usage = """\
Usage: python -m hglviz <lo-firrtl-file> [dot-program] [open-program]
       <dot-program> one of dot family circo, dot, fdp, neato, osage, sfdp, twopi,
                     or a program taking the same -Tpng -O <file> arguments
                     default is fdp, use none to not produce png
       <open-program> default is open, this works on os-x, use none to not open
"""


def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog='hglviz', usage=_usage, description="Render a low form circuit as a graphviz graph")
    p.add_argument('filename', nargs='?', help="low form circuit file")
    p.add_argument('dot_program', nargs='?', default='fdp', help="program that draws the png")
    p.add_argument('open_program', nargs='?', default='open', help="program that opens the png")
    p.add_argument('--depth', action='append', default=[], metavar='TARGET=N', 
                   help="render depth of a module, TARGET may be * for the whole circuit (repeatable)")
    p.add_argument('--build-dir', default='.', help="directory of the dot file")
    p.add_argument('--strict', action='store_true', help="fail on connections to unrecognized targets")
    p.add_argument('--verbose', action='store_true', help="trace module scopes")
    args = p.parse_args(argv)

    if args.filename is None:
        print(_usage)
        return 1

    try:
        directives = [Directive.parse(_depth_directive(i)) for i in args.depth]
    except ValueError as e:
        p.error(str(e))

    visualize(
        args.filename, 
        args.dot_program, 
        args.open_program, 
        directives, 
        build_dir=args.build_dir, 
        strict=args.strict, 
        verbose_scope=args.verbose,
    )
    return 0


def _depth_directive(s: str) -> str:
    """ Top=2 -> Top:Depth=2, *=1 -> *:Depth=1
    """
    target, sep, depth = s.partition('=')
    if not sep or not target:
        raise ValueError(f'invalid depth {s!r}, expected TARGET=N')
    return f'{target}:{Directive.Depth}={depth}'


if __name__ == '__main__':
    sys.exit(main())
