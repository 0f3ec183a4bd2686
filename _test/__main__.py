import sys
from hglviz.tester import tester


filter = '|'.join(sys.argv[1:])
if not filter: filter = '.*'
tester.filter(filter)

from _test import test0_parser
from _test import test1_graph
from _test import test2_scope
from _test import test3_translate
from _test import test4_transform


sys.exit(1 if tester.summary() else 0)
