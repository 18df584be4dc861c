# tests/conftest.py

import json

import pytest
from specklepy.transports.memory import MemoryTransport


class BulkMemoryTransport(MemoryTransport):
    """
    MemoryTransport that can also hand out an object with its children,
    the way the server transport does for a version download.
    `copies` records every bulk download.
    """

    def __init__(self, name="BulkMemory"):
        super().__init__(name=name)
        self.copies = []

    def copy_object_and_children(self, id, target_transport):
        self.copies.append(id)
        root = self.objects[id]
        for child_id in json.loads(root).get("__closure", {}):
            if child_id in self.objects:
                target_transport.save_object(child_id, self.objects[child_id])
        target_transport.save_object(id, root)
        return root


def store(transport, *objects):
    for obj in objects:
        transport.save_object(obj["id"], json.dumps(obj))
    return transport


@pytest.fixture
def transport():
    return BulkMemoryTransport()
