"""All signals used by billtag.

Signals are the main tools used for decoupling applications components by
sending notifications. In short, signals allow certain senders to notify
subscribers that something happened.

Cf. https://flask.palletsprojects.com/signals/ for detailed documentation.

Tag signals are only sent once the database transaction that carries the
change has been committed.
"""
from blinker import Namespace

signals = Namespace()

#: Triggered at application initialization when all extensions and services
#: have been registered
components_registered = signals.signal("app:components:registered")

#: A tag has been attached to an object. Receivers get `tag` and `context`.
tag_created = signals.signal("tag:created")

#: A tag has been removed from an object. Receivers get `tag` and `context`.
tag_deleted = signals.signal("tag:deleted")

#: Receivers get `definition` and `context`.
tag_definition_created = signals.signal("tag-definition:created")

#: Receivers get `definition` and `context`.
tag_definition_deleted = signals.signal("tag-definition:deleted")
