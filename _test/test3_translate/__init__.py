from . import circuits 
from . import depth
from . import degrade
