# Routers package: reference routes for a host application

from . import demo

__all__ = ["demo"]
