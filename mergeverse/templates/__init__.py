from . import texts
