"""Tag commands: `flask tags ...`."""
import click
from flask.cli import AppGroup

from billtag.core.callcontext import CallOrigin, UserType
from billtag.services.tagging import TagError, tag_service
from billtag.services.tagging.objects import ALL_OBJECT_TYPES

tags_commands = AppGroup("tags", help="Manage tag definitions and tags.")

object_type_arg = click.argument(
    "object_type",
    type=click.Choice([str(t) for t in ALL_OBJECT_TYPES], case_sensitive=False),
)
object_id_arg = click.argument("object_id", type=click.UUID)
user_option = click.option(
    "--user", "user_name", default="cli", show_default=True, help="Author of the change."
)
tenant_option = click.option("--tenant", type=int, default=0, show_default=True)


def _context(user_name, tenant):
    return tag_service.create_context(
        user_name,
        origin=CallOrigin.INTERNAL,
        user_type=UserType.ADMIN,
        tenant_record_id=tenant,
    )


@tags_commands.command()
@tenant_option
def definitions(tenant):
    """List tag definitions."""
    for definition in tag_service.get_definitions(tenant):
        kind = "control" if definition.is_control_tag else "user"
        click.echo(f"{definition.name}\t{kind}\t{definition.description}")


@tags_commands.command("create-definition")
@click.argument("name")
@click.option("--description", default="")
@user_option
@tenant_option
def create_definition(name, description, user_name, tenant):
    """Register a new tag definition."""
    try:
        definition = tag_service.create_definition(
            name, description, _context(user_name, tenant)
        )
    except TagError as e:
        raise click.ClickException(f"{e.__class__.__name__}: {e}")
    click.echo(f"Created tag definition {definition.name} ({definition.id})")


@tags_commands.command("delete-definition")
@click.argument("name")
@user_option
@tenant_option
def delete_definition(name, user_name, tenant):
    """Delete an unused tag definition."""
    try:
        tag_service.delete_definition(name, _context(user_name, tenant))
    except TagError as e:
        raise click.ClickException(f"{e.__class__.__name__}: {e}")
    click.echo(f"Deleted tag definition {name}")


@tags_commands.command()
@object_type_arg
@object_id_arg
@tenant_option
def show(object_type, object_id, tenant):
    """Show tags of an object, and the billing actions they allow."""
    store = tag_service.get_tag_store(object_id, object_type, tenant)
    for tag in store:
        kind = tag.control_type or "-"
        click.echo(f"{tag.tag_definition_name}\t{kind}\t{tag.id}")
    click.echo(
        "generate_invoice={} process_payment={} enforce_overdue={}".format(
            store.generate_invoice(), store.process_payment(), store.enforce_overdue()
        )
    )


@tags_commands.command()
@object_type_arg
@object_id_arg
@click.argument("name")
@user_option
@tenant_option
def add(object_type, object_id, name, user_name, tenant):
    """Tag an object."""
    try:
        tag = tag_service.add_tag(
            object_id, object_type, name, _context(user_name, tenant)
        )
    except TagError as e:
        raise click.ClickException(f"{e.__class__.__name__}: {e}")
    click.echo(f"Added tag {tag} ({tag.id})")


@tags_commands.command()
@object_type_arg
@object_id_arg
@click.argument("name")
@user_option
@tenant_option
def remove(object_type, object_id, name, user_name, tenant):
    """Remove a tag from an object."""
    tag = tag_service.remove_tag(
        object_id, object_type, name, _context(user_name, tenant)
    )
    if tag is None:
        click.echo(f"No tag {name} on {object_type}:{object_id}")
    else:
        click.echo(f"Removed tag {tag} ({tag.id})")
