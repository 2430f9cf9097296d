"""Notion database as a source of pages to publish.

:class:`NotionSource` is the thin layer between the batch driver and the
Notion REST API: it lists candidate pages by status, fetches a page's block
tree with children attached, and moves pages through the publishing
workflow by rewriting their status property.
"""

from __future__ import annotations

from typing import Any

from hugoify.config import HugoifyConfig

from .transport import NotionTransport

# Children of these blocks are separate pages, not page content.
_OPAQUE_CHILDREN = frozenset({"child_page", "child_database"})


class NotionSource:
    """Read pages and block trees from a Notion database.

    Parameters
    ----------
    config:
        Supplies ``database_id`` and the status property name and values.
    transport:
        A configured :class:`NotionTransport`.
    """

    def __init__(self, config: HugoifyConfig, transport: NotionTransport) -> None:
        self._config = config
        self._transport = transport

    def query_database(self, status: str) -> list[dict[str, Any]]:
        """Return every page of the database whose status equals *status*."""
        body = {
            "filter": {
                "property": self._config.properties.status,
                "status": {"equals": status},
            },
        }
        return list(self._transport.paginate(
            f"/databases/{self._config.database_id}/query", method="POST", json=body,
        ))

    def pending_pages(self) -> list[dict[str, Any]]:
        """Pages ready to publish followed by pages marked for deletion."""
        status = self._config.status
        return self.query_database(status.ready) + self.query_database(status.to_delete)

    def get_block_tree(self, block_id: str) -> list[dict[str, Any]]:
        """Fetch the children of *block_id*, recursively.

        Each block with ``has_children`` gets a ``children`` list holding
        its own fetched children, so the result is a self-contained tree.
        """
        blocks = list(self._transport.paginate(f"/blocks/{block_id}/children"))
        for block in blocks:
            if block.get("has_children") and block.get("type") not in _OPAQUE_CHILDREN:
                block["children"] = self.get_block_tree(block["id"])
        return blocks

    def update_status(self, page_id: str, status: str) -> dict[str, Any]:
        """Set the page's status property to *status*."""
        body = {
            "properties": {
                self._config.properties.status: {"status": {"name": status}},
            },
        }
        return self._transport.request("PATCH", f"/pages/{page_id}", json=body)
