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
from typing import Any, Callable, Dict, List, Optional, Tuple

from ._hgl import HGL



class Dispatcher:
    """Dispatch a function on the type of its first argument 

    1. handlers registered later are prior to earlier ones 
    2. subclasses match handlers of their bases 
    3. cache 
    4. each function name has an optional default arm for unmatched types
    """
    
    def __init__(self):
        # 'expr': [(f, (Reference, SubField))]
        self._table: Dict[str, List[Tuple[Callable, Tuple[type, ...]]]] = {}
        self._defaults: Dict[str, Callable] = {}
        self._cache: Dict[Tuple[str, type], Optional[Callable]] = {}

    def dispatch(self, f_name: str, f: Callable, types: Any):
        """ ex. dispatch('expr', f, [Reference, SubField]) 
                dispatch('stmt', f, Block)

        Any matches every type
        """
        assert callable(f)
        if f_name not in self._table:
            self._table[f_name] = []

        self._cache.clear()
        
        if not isinstance(types, (tuple, list)):
            types = (types,)
        for i in types: 
            assert i is Any or isinstance(i, type), f'{i} is not type'
                
        self._table[f_name].insert(0, (f, tuple(types)))

    def default(self, f_name: str, f: Callable):
        """ called when no handler matches
        """
        assert callable(f)
        self._defaults[f_name] = f

    def type(self, obj) -> type: 
        if isinstance(obj, HGL):
            return obj.__hgl_type__
        else:
            return type(obj)

    def find(self, f_name: str, t: type) -> Optional[Callable]:
        key = (f_name, t)
        if key in self._cache:
            return self._cache[key]
        ret = None
        for f, types in self._table.get(f_name, ()):
            if any(i is Any or issubclass(t, i) for i in types):
                ret = f 
                break
        self._cache[key] = ret 
        return ret

    def call(self, f_name: str, obj, *args, **kwargs):
        """ ex. call('expr', expression, context)
        """
        f = self.find(f_name, self.type(obj))
        if f is None:
            f = self._defaults.get(f_name)
        if f is None:
            raise TypeError(f'{f_name}: no handler for {self.type(obj).__name__}')
        return f(obj, *args, **kwargs)

    def __str__(self):
        ret = []
        for f_name, fs in self._table.items():
            names = ', '.join(i.__name__ for _, types in fs for i in types if i is not Any)
            ret.append(f'{f_name}: {names}')
        return '\n'.join(ret)


def singleton(_class: type) -> object:
    """ return the instance of the input class
    """
    assert isinstance(_class, type)
    return _class()
