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
from typing import Any, List, Tuple, Union

import gmpy2

from hglviz.ir import DefMemory, DoPrim, Expression, ExtModule, Port


"""
helpers called by the grammar actions of firrtl.gram
"""


def literal_value(s: str) -> gmpy2.mpz:
    """ ex. 12, -3, "h1f", "b101", "o17", "h-1f", "-d5"
    """
    s = s.strip('"').lower().replace('_', '')
    sign = 1 
    if s.startswith('-'):
        sign, s = -1, s[1:]
    base = 10
    if s and s[0] in 'hbod':
        base = {'h': 16, 'b': 2, 'o': 8, 'd': 10}[s[0]]
        s = s[1:]
    if s.startswith('-'):
        sign, s = -sign, s[1:]
    elif s.startswith('+'):
        s = s[1:]
    return sign * gmpy2.mpz(s, base)


def prim_op(op: str, items: List[Union[Expression, int]]) -> DoPrim:
    """ bits(x, 7, 0) -> DoPrim('bits', [x], [7, 0])
    """
    args = [i for i in items if isinstance(i, Expression)]
    consts = [i for i in items if not isinstance(i, Expression)]
    return DoPrim(op, args, consts)


def memory(name: str, fields: List[Tuple[str, Any]]) -> DefMemory:
    """ fields: ('depth', 16), ('readers', 'r'), ... in source order
    """
    ret = DefMemory(name)
    for key, value in fields:
        if key in ('readers', 'writers', 'readwriters'):
            getattr(ret, key).append(value)
        else:
            setattr(ret, key, value)
    return ret


def ext_module(name: str, ports: List[Port], items: List[tuple]) -> ExtModule:
    defname = ''
    params = {}
    for item in items:
        if item[0] == 'defname':
            defname = item[1]
        else:
            params[item[1]] = item[2]
    return ExtModule(name, ports, defname, params)


__all__ = ['literal_value', 'prim_op', 'memory', 'ext_module']
