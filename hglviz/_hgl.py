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



class HGL:
    """ base of every circuit IR object and graph node 
    
    identity hash, so objects can be dict keys even when they define __eq__
    """

    __slots__ = () 

    @property 
    def __hgl_type__(self):
        return type(self) 
    
    def __copy__(self):             
        return self      
    
    def __hash__(self):             
        return id(self)

    def __str__(self):              
        return self.__class__.__name__

    def __repr__(self):             
        return str(self)
