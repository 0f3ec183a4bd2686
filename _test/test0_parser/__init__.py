from . import source 
from . import reader
