from .is_private import IsPrivate
from .admin import IsAdmin
