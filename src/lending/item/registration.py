"""Item registration — command and handler for putting units into stock."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from lending.domain import lending
from lending.item.item import Item


@lending.command(part_of="Item")
class RegisterItem:
    """Register a new physical unit of an equipment type."""

    equipment_id = Identifier(required=True)
    serial_number = String(max_length=100)


@lending.command_handler(part_of=Item)
class RegisterItemHandler:
    @handle(RegisterItem)
    def register_item(self, command):
        item = Item.register(
            equipment_id=command.equipment_id,
            serial_number=command.serial_number,
        )
        current_domain.repository_for(Item).add(item)
        return str(item.id)
