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
from typing import Any, Dict, List, Optional

import os

import hglviz.tester.utils as tester_utils
from hglviz._hgl import HGL
from hglviz.visualizer.names import NameTable


class VisualizerError(Exception):
    pass


class Session(HGL):
    """ state of one translation: name table, literal counter, warnings 

    a new session per circuit; nothing is shared between sessions, so 
    translating the same circuit twice gives the same graph
    """
    
    __slots__ = '__dict__'
    
    def __init__(
            self, 
            *,
            build_dir: str = '.',
            strict: bool = False,
            verbose_scope: bool = False,
            verbose_graph: bool = False,
        ) -> None:
        
        self.build_dir = build_dir 
        # raise on connections with an unrecognized sink
        self.strict = strict 
        self.verbose_scope = verbose_scope 
        self.verbose_graph = verbose_graph 

        self._intend = 0    

        # fully-qualified name -> driver node
        self.names = NameTable()
        # literal nodes are numbered in order of occurrence
        self.n_literals = 0 
        # module instances visited
        self.n_modules = 0 
        # build warnings
        self.log = _Logging()

    def new_literal_id(self) -> int:
        ret = self.n_literals 
        self.n_literals += 1 
        return ret

    def print(self, obj: object, intend: int = 0):
        """ print for debug
        """
        if intend > 0:
            self._intend += intend 
            print(tester_utils._fill_terminal(self._intend * '┃  ' + '┏', '━', 'left'))
        elif intend < 0:
            print(tester_utils._fill_terminal(self._intend * '┃  ' + '┗', '━', 'left'))
            self._intend += intend 
        if obj is None: return 
        s = str(obj)
        i =  self._intend * '┃  ' + '┃'  
        print(i + f'\n{i}'.join(s.splitlines()))

    def get_filepath(self, relative_path: str) -> str:
        """ path relative to build directory, directory is created if missing
        """
        if os.path.isabs(relative_path):
            filepath = relative_path 
        else:
            filepath = os.path.abspath(os.path.join(self.build_dir, relative_path))
        directory = os.path.dirname(filepath)
        if not os.path.isdir(directory):
            os.makedirs(directory)
        return filepath

    def __str__(self):
        ret = [tester_utils._yellow("Summary: ")]
        ret.append(f'  n_modules: {self.n_modules}')
        ret.append(f'  n_names: {len(self.names)}')
        ret.append(f'  n_literals: {self.n_literals}')
        ret.append(str(self.log))
        return '\n'.join(ret)


class _Logging:
    def __init__(self) -> None:
        self.warnings: List[str] = []
        
    def warning(self, msg: str):
        msg = '  ' + '  '.join(msg.splitlines(keepends=True))
        self.warnings.append(f"{tester_utils._red('Warning:')}\n{msg}") 

    def __len__(self) -> int:
        return len(self.warnings)

    def __str__(self) -> str:
        ret = [f'  n_warnings: {len(self.warnings)}']
        for i in self.warnings:
            ret.append('─────────────────────────────────────────────────')
            ret.append(str(i))
        return '\n'.join(ret)
