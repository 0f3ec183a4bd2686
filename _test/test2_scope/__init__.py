from . import directives 
from . import scope
