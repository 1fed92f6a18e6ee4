"""The tag service.

Facade over the tag definition registry and the tag DAO. Tag signals queued
by the DAOs are sent by this service once the session commits.
"""
import uuid
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

from sqlalchemy import event
from sqlalchemy.orm import Session

from billtag.core.callcontext import DEFAULT_TENANT, CallContext, CallContextFactory
from billtag.core.clock import Clock
from billtag.core.transaction import pop_pending_signals, send_pending_signals
from billtag.services.base import Service, ServiceState

from .dao import TagDao
from .definitions import TagDefinitionDao
from .models import TagDefinition
from .objects import ObjectType
from .store import TagStore
from .tags import Tag

if TYPE_CHECKING:
    from billtag.app import Application


class TagServiceState(ServiceState):
    def __init__(self, service: "TagService", *args: Any, **kwargs: Any) -> None:
        super().__init__(service, *args, **kwargs)
        self.clock: Clock = Clock()
        self.context_factory = CallContextFactory(self.clock)


class TagService(Service):
    """Tags attached to billing objects."""

    name = "tagging"
    AppStateClass = TagServiceState

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._listening = False

    def init_app(self, app: "Application") -> None:
        super().init_app(app)
        app.config.setdefault("TAGGING_AUTOCOMMIT", True)

        if not self._listening:
            event.listen(Session, "after_commit", self.after_commit)
            event.listen(Session, "after_rollback", self.after_rollback)
            self._listening = True

    #
    # Collaborators
    #
    @property
    def clock(self) -> Clock:
        return self.app_state.clock

    def set_clock(self, clock: Clock) -> None:
        """Timestamp call contexts with `clock` from now on."""
        state = self.app_state
        state.clock = clock
        state.context_factory = CallContextFactory(clock)

    @property
    def context_factory(self) -> CallContextFactory:
        return self.app_state.context_factory

    def create_context(self, user_name: str, **kwargs: Any) -> CallContext:
        return self.context_factory.create_call_context(user_name, **kwargs)

    @property
    def definitions(self) -> TagDefinitionDao:
        return TagDefinitionDao()

    @property
    def dao(self) -> TagDao:
        return TagDao()

    #
    # Tag definitions
    #
    def create_definition(
        self, name: str, description: Optional[str], context: CallContext
    ) -> TagDefinition:
        return self.definitions.create(name, description, context)

    def delete_definition(self, name: Any, context: CallContext) -> None:
        self.definitions.delete(name, context)

    def get_definition(
        self, name: Any, tenant_record_id: int = DEFAULT_TENANT
    ) -> Optional[TagDefinition]:
        return self.definitions.get_by_name(name, tenant_record_id)

    def get_definitions(self, tenant_record_id: int = DEFAULT_TENANT) -> List[TagDefinition]:
        return self.definitions.list(tenant_record_id)

    #
    # Tags
    #
    def add_tag(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        definition: Any,
        context: CallContext,
    ) -> Tag:
        return self.dao.insert_tag(object_id, object_type, definition, context)

    def remove_tag(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        definition: Any,
        context: CallContext,
    ) -> Optional[Tag]:
        return self.dao.delete_tag(object_id, object_type, definition, context)

    def get_tags(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> List[Tag]:
        """Tags of an object, sorted by definition name."""
        return list(self.dao.load_entities(object_id, object_type, tenant_record_id).values())

    def get_tag_store(
        self,
        object_id: uuid.UUID,
        object_type: Union[ObjectType, str],
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> TagStore:
        tags = self.dao.load_entities(object_id, object_type, tenant_record_id)
        return TagStore.from_tags(object_id, object_type, tags)

    def commit_store(
        self, store: TagStore, context: CallContext
    ) -> Tuple[List[Tag], List[Tag]]:
        """Persist the membership of `store`.

        :returns: `(inserted, deleted)` tags.
        """
        return self.dao.save_entities(
            store.object_id, store.object_type, store.members(), context
        )

    def get_objects_tagged_with(
        self,
        definition: Any,
        object_type: Optional[Union[ObjectType, str]] = None,
        tenant_record_id: int = DEFAULT_TENANT,
    ) -> List[Tuple[uuid.UUID, ObjectType]]:
        return self.dao.get_objects_tagged_with(definition, object_type, tenant_record_id)

    #
    # Session hooks
    #
    def after_commit(self, session: Session) -> None:
        if session.in_nested_transaction():
            # savepoint released: nothing is written in DB yet
            return

        if not self.running:
            pop_pending_signals(session)
            return

        send_pending_signals(session, self)

    def after_rollback(self, session: Session) -> None:
        if session.in_nested_transaction():
            return
        pending = pop_pending_signals(session)
        if pending:
            self.logger.debug("Rollback: dropped %d pending signal(s)", len(pending))


tag_service = TagService()
