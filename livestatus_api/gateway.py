"""Resource gateway: REST resources on top of Livestatus tables.

Each resource kind is described once by a :class:`ResourceDescriptor`
(column contract, routes, key columns and key parsers). One generic
list/get implementation serves all of them, doing exactly one Livestatus
round trip per call.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from .columns import (
    COMMENT_CONTRACT,
    CONTACT_CONTRACT,
    DOWNTIME_CONTRACT,
    HOST_CONTRACT,
    SERVICE_CONTRACT,
    STATUS_CONTRACT,
    ColumnContract,
)
from .decoder import decode
from .errors import NotFoundError
from .livestatus_client import LivestatusClient
from .models import Record, Status
from .query import LivestatusQuery, check_filter_value, parse_numeric_key

KeyParser = Callable[[str, str, str], Any]


@dataclass(frozen=True)
class KeyPart:
    """One path segment of an item route and the column it filters on."""

    path_param: str
    column: str
    parse: KeyParser

    @property
    def key_name(self) -> str:
        return self.path_param


def _numeric(column: str) -> KeyPart:
    return KeyPart(path_param=column, column=column, parse=parse_numeric_key)


def _text(path_param: str, column: str) -> KeyPart:
    return KeyPart(path_param=path_param, column=column, parse=check_filter_value)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Everything needed to serve one resource kind over HTTP."""

    name: str
    title: str
    contract: ColumnContract
    collection_path: str
    item_path: str
    key: Tuple[KeyPart, ...]

    @property
    def kind(self) -> str:
        return self.contract.kind

    def parse_key(self, raw: Dict[str, str]) -> List[Tuple[str, Any]]:
        """Turn raw path parameters into ``(column, value)`` filter pairs.

        Raises:
            BadKeyError: If any part of the key is malformed.
        """
        return [
            (part.column, part.parse(self.kind, part.key_name, raw[part.path_param]))
            for part in self.key
        ]


RESOURCES: Dict[str, ResourceDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        ResourceDescriptor(
            name="comments",
            title="Comment",
            contract=COMMENT_CONTRACT,
            collection_path="/comments",
            item_path="/comments/{id}",
            key=(_numeric("id"),),
        ),
        ResourceDescriptor(
            name="contacts",
            title="Contact",
            contract=CONTACT_CONTRACT,
            collection_path="/contacts",
            item_path="/contacts/{name}",
            key=(_text("name", "name"),),
        ),
        ResourceDescriptor(
            name="downtimes",
            title="Downtime",
            contract=DOWNTIME_CONTRACT,
            collection_path="/downtimes",
            item_path="/downtimes/{id}",
            key=(_numeric("id"),),
        ),
        ResourceDescriptor(
            name="hosts",
            title="Host",
            contract=HOST_CONTRACT,
            collection_path="/hosts",
            item_path="/hosts/{name}",
            key=(_text("name", "name"),),
        ),
        ResourceDescriptor(
            name="services",
            title="Service",
            contract=SERVICE_CONTRACT,
            collection_path="/services",
            item_path="/hosts/{host_name}/services/{name}",
            key=(_text("host_name", "host_name"), _text("name", "description")),
        ),
    )
}


def get_descriptor(name: str) -> ResourceDescriptor:
    """Look up a resource descriptor by its collection name (``hosts``, ...)."""
    try:
        return RESOURCES[name]
    except KeyError:
        raise ValueError(
            f"Unknown resource '{name}'. Known resources: {', '.join(sorted(RESOURCES))}"
        ) from None


class ResourceGateway:
    """Serve resource collections and single items from Livestatus."""

    def __init__(self, client: LivestatusClient):
        self.client = client
        self.logger = logging.getLogger(__name__)

    def list(self, resource: str) -> List[Record]:
        """Return every record of a resource kind, possibly none."""
        descriptor = get_descriptor(resource)
        query = LivestatusQuery.for_contract(descriptor.contract)
        return self._fetch(descriptor, query)

    def get(self, resource: str, key: Dict[str, str]) -> Record:
        """Return the single record matching ``key``.

        Args:
            resource: Collection name, e.g. ``hosts``
            key: Raw path parameters of the item route

        Raises:
            BadKeyError: If the key is malformed
            NotFoundError: If no record matches
            QueryFailedError: If the Livestatus round trip fails
            DecodeError: If the reply does not match the column contract
        """
        descriptor = get_descriptor(resource)
        query = LivestatusQuery.for_contract(descriptor.contract)
        for column, value in descriptor.parse_key(key):
            query = query.filter(column, value)

        records = self._fetch(descriptor, query)
        if not records:
            raise NotFoundError(descriptor.title)
        if len(records) > 1:
            self.logger.debug(
                f"{descriptor.title} lookup {key} matched {len(records)} rows, using the first"
            )
        return records[0]

    def _fetch(self, descriptor: ResourceDescriptor, query: LivestatusQuery) -> List[Record]:
        start_time = datetime.now()

        with self.client.execute(query) as response:
            payload = response.read()
        records = decode(payload, descriptor.contract)

        execution_time = (datetime.now() - start_time).total_seconds() * 1000
        self.logger.debug(
            f"Fetched {len(records)} {descriptor.name} in {execution_time:.2f}ms"
        )
        return records

    def check_connection(self) -> Optional[Status]:
        """Run a minimal status query and return the core's version information."""
        query = LivestatusQuery.for_contract(STATUS_CONTRACT)
        rows = decode(self.client.query(query), STATUS_CONTRACT)
        return rows[0] if rows else None

