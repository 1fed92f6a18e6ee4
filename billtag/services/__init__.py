"""Modules that provide services. They are implemented as Flask extensions
(see: https://flask.palletsprojects.com/extensiondev/)."""
from flask import current_app

from .audit import audit_service
from .base import Service, ServiceState
from .tagging import tag_service

__all__ = ["Service", "ServiceState", "get_service", "audit_service", "tag_service"]


def get_service(service: str) -> Service:
    return current_app.services.get(service)
