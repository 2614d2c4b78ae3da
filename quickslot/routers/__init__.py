# quickslot/routers/__init__.py
from . import health
from . import auth
from . import doctors
from . import schedules
from . import slots
from . import appointments
from . import dashboard
from . import public

__all__ = [
    "health",
    "auth",
    "doctors",
    "schedules",
    "slots",
    "appointments",
    "dashboard",
    "public",
]
