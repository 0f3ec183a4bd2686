from . import nodes 
from . import dispatch
