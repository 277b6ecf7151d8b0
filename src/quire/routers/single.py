"""Router that puts the whole graph into one document."""

from __future__ import annotations

from quire.models import Entity
from quire.routers.base import AddressTable, Document, RoutingOptions, anchor_subtree

SINGLE_TEMPLATE = "single"


class SingleDocumentRouter:
    """Route the root to ``options.filename`` and anchor everything else into it.

    The default filename is ``""``, meaning the output target path itself is
    the file to write.
    """

    def __init__(self, options: RoutingOptions) -> None:
        self.options = options

    def build(self, root: Entity, table: AddressTable) -> list[Document]:
        table.assign_url(root, self.options.filename)
        for child in root.children:
            anchor_subtree(child, root, table)
        return [Document(self.options.filename, SINGLE_TEMPLATE, root, root)]


def single_router(options: RoutingOptions) -> SingleDocumentRouter:
    return SingleDocumentRouter(options)
