from .runner import tester
from .utils import relative_path

__all__ = ['tester', 'relative_path']
