"""Services: Flask extensions with a per-application running state.

A service registers itself in `app.extensions` (its state) and in
`app.services` (itself). Services are started by the application, except
in testing mode where tests start the ones they need.
"""
import logging
from typing import TYPE_CHECKING, Any

from flask import current_app

from billtag.core.util import fqcn

if TYPE_CHECKING:
    from billtag.app import Application


class ServiceNotRegistered(Exception):
    pass


class ServiceStateError(RuntimeError):
    """Raised when starting a running service, or stopping a halted one."""


class ServiceState:
    """State of a service for one application."""

    #: reference to :class:`Service` instance
    service: "Service"

    running = False

    def __init__(self, service: "Service", running: bool = False) -> None:
        self.service = service
        self.running = running


class Service:
    """Base class for services."""

    #: State class to use for this Service
    AppStateClass = ServiceState

    #: service name in Application.extensions / Application.services
    name: str = None  # type: ignore

    def __init__(self, app: Any = None) -> None:
        if not self.name:
            raise ValueError(f"Service must have a name ({fqcn(self.__class__)})")

        self.logger = logging.getLogger(fqcn(self.__class__))
        if app:
            self.init_app(app)

    def init_app(self, app: "Application") -> None:
        app.extensions[self.name] = self.AppStateClass(self)
        app.services[self.name] = self

    def start(self, ignore_state: bool = False) -> None:
        self._set_running(True, ignore_state)
        self.logger.debug("Service %r started", self.name)

    def stop(self, ignore_state: bool = False) -> None:
        self._set_running(False, ignore_state)
        self.logger.debug("Service %r stopped", self.name)

    def _set_running(self, running: bool, ignore_state: bool) -> None:
        state = self.app_state
        if state.running == running and not ignore_state:
            verb = "running" if running else "stopped"
            raise ServiceStateError(f"Service {self.name!r} is already {verb}")
        state.running = running

    @property
    def app_state(self) -> Any:
        """State of the service in the current application.

        :raise ServiceNotRegistered: if the current application has not
            registered the service.
        :raise RuntimeError: outside of an application context.
        """
        try:
            return current_app.extensions[self.name]
        except KeyError:
            raise ServiceNotRegistered(self.name)

    @property
    def running(self) -> bool:
        """`False` outside of an application context, or when the service is
        not registered or halted for the current application."""
        try:
            return self.app_state.running
        except (RuntimeError, ServiceNotRegistered):
            return False
