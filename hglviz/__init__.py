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

from hglviz.config import CIRCUIT, Directive, conf
from hglviz.parser import FirrtlSyntaxError, parse_file, parse_string
from hglviz.graph import ModuleNode
from hglviz.visualizer import (
    NameTable, Scope, Session, VisualizerError, VisualizerPass, VisualizerTransform, 
    get_scope, show, visualize,
)
