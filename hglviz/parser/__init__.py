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
from typing import Optional, Type

import io
import os
import re
import tokenize

from pegen.grammar_parser import GeneratedParser as GrammarParser
from pegen.parser import Parser
from pegen.python_generator import PythonParserGenerator
from pegen.tokenizer import Tokenizer

from hglviz.ir import Circuit
from .actions import literal_value


"""
reader of textual low form circuits 

the parser is generated by pegen from firrtl.gram, the first time it is needed
"""


class FirrtlSyntaxError(SyntaxError):
    pass


gram_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'firrtl.gram')

_parser_class: Optional[Type[Parser]] = None


def generate_parser_source(filename: str = gram_file) -> str:
    """ python source of the parser, as `python -m pegen firrtl.gram` writes it
    """
    with open(filename, 'r') as f:
        grammar = GrammarParser(Tokenizer(tokenize.generate_tokens(f.readline))).start()
    if grammar is None:
        raise ValueError(f'invalid grammar {filename}')
    out = io.StringIO()
    PythonParserGenerator(grammar, out).generate(os.path.basename(filename))
    return out.getvalue()


def parser_class() -> Type[Parser]:
    global _parser_class
    if _parser_class is None:
        namespace = {'__name__': 'hglviz.parser.firrtl_parser'}
        exec(compile(generate_parser_source(), gram_file, 'exec'), namespace)
        _parser_class = namespace['FirrtlParser']
    return _parser_class


#----------------------------------
# source cleaning
#----------------------------------

# circuit Top : %[[{...}]], may span lines
_annotation = re.compile(r'%\[\[.*?\]\]', re.S)
_version = re.compile(r'^[ \t]*FIRRTL[ \t]+version\b.*$', re.M)
# strings are kept, source info @[...] and ; comments are dropped
_info = re.compile(r'("(?:[^"\\]|\\.)*")|@\[[^\]]*\]|;.*')
_string = re.compile(r'"(?:[^"\\]|\\.)*"')
_invalid = re.compile(r'[^\w\s.,:()\[\]{}<>=+-]')


def clean_source(text: str) -> str:
    """ drop annotations, version line, source info and comments; line numbers are kept

    characters the python tokenizer should never see raise FirrtlSyntaxError
    """
    text = _annotation.sub(lambda m: '\n' * m.group().count('\n'), text)
    text = _version.sub('', text)
    lines = []
    for lineno, line in enumerate(text.splitlines(), 1):
        line = _info.sub(lambda m: m.group(1) or '', line).rstrip()
        bad = _invalid.search(_string.sub('""', line))
        if bad is not None:
            raise FirrtlSyntaxError(f'line {lineno}: invalid character {bad.group()!r}')
        lines.append(line)
    return '\n'.join(lines) + '\n'


#----------------------------------
# entry points
#----------------------------------

def parse_string(text: str) -> Circuit:
    """ textual low form circuit -> Circuit
    """
    tokenizer = Tokenizer(tokenize.generate_tokens(io.StringIO(clean_source(text)).readline))
    parser = parser_class()(tokenizer)
    try:
        ret = parser.start()
    except tokenize.TokenError as e:
        # ex. ('EOF in multi-line statement', (3, 0))
        lineno = e.args[1][0] if len(e.args) > 1 else 0
        raise FirrtlSyntaxError(f'line {lineno}: {e.args[0]}') from None
    except SyntaxError as e:
        # inconsistent indentation
        raise FirrtlSyntaxError(f'line {e.lineno}: {e.msg}') from None
    if ret is None:
        tok = tokenizer.diagnose()
        raise FirrtlSyntaxError(f'line {tok.start[0]}: invalid syntax at {tok.string!r}')
    return ret


def parse_file(filename: str) -> Circuit:
    with open(filename, 'r') as f:
        return parse_string(f.read())


__all__ = [
    'FirrtlSyntaxError', 'clean_source', 'generate_parser_source', 'parser_class', 
    'parse_string', 'parse_file', 'literal_value',
]
