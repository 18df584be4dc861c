# tests/test_operations.py

import logging

import pytest
from specklepy.transports.memory import MemoryTransport

from speckle_tabular import (
    InvalidInputException,
    ObjectNotFoundException,
    PipelineSettings,
    load_model,
    load_model_batch,
    query_objects,
    query_objects_batch,
    query_properties,
    query_properties_batch,
)

from conftest import store


@pytest.fixture
def model(transport):
    return store(
        transport,
        {
            "id": "wall",
            "speckle_type": "Objects.Data.DataObject",
            "displayValue": [{"referencedId": "mesh"}],
            "properties": {
                "Parameters": {
                    "Type Parameters": {"Width": {"name": "Width", "value": 300}}
                },
                "Material": {"referencedId": "material"},
            },
        },
        {"id": "material", "speckle_type": "Objects.Other.Material", "name": "Concrete"},
        {"id": "chunk", "speckle_type": "Speckle.Core.Models.DataChunk", "data": [1, 2]},
        {
            "id": "root",
            "speckle_type": "Speckle.Core.Models.Collections.Collection",
            "__closure": {"wall": 1, "chunk": 2},
            "totalChildrenCount": 2,
            "elements": [{"referencedId": "wall"}],
        },
    )


def test_load_model_downloads_and_resolves(model):
    objects = load_model(model, "root")

    assert [obj["id"] for obj in objects] == ["root", "wall", "chunk", "material"]
    # displayValue is masked out, so the mesh is never requested
    assert all("displayValue" not in obj for obj in objects)


def test_load_then_query_pipeline(model):
    objects = load_model(model, "root", PipelineSettings(max_iterations=2))

    selected = query_objects(objects)
    assert [obj["id"] for obj in selected] == ["wall"]
    assert "totalChildrenCount" not in selected[0]

    assert query_properties(selected[0]) == {"Width": 300, "referencedId": "material"}


def test_query_objects_requires_a_list():
    with pytest.raises(InvalidInputException):
        query_objects({"id": "a"})


def test_query_properties_rejects_lists():
    with pytest.raises(InvalidInputException):
        query_properties([{"id": "a"}])


def test_batches_raise_by_default():
    with pytest.raises(InvalidInputException):
        query_properties_batch([{"properties": {"a": 1}}, [1]])


def test_batches_continue_on_fail():
    settings = PipelineSettings(continue_on_fail=True)

    records = query_properties_batch([{"properties": {"a": 1}}, [1]], settings)
    assert records[0] == {"a": 1}
    assert records[1]["error"].startswith("Query properties expects individual objects")

    selected = query_objects_batch(
        [[{"id": "1", "speckle_type": "Wall"}], "nope", [{"id": "2"}]], settings
    )
    assert selected[0] == {"id": "1", "speckle_type": "Wall"}
    assert selected[1]["error"].startswith("Input must be a list of objects")
    assert selected[2] == {"id": "2"}


def test_load_model_reads_plain_memory_transports():
    transport = store(
        MemoryTransport(),
        {"id": "wall", "speckle_type": "Objects.Data.DataObject", "type": {"referencedId": "type"}},
        {"id": "type", "speckle_type": "Objects.Other.Type"},
        {"id": "root", "__closure": {"wall": 1}, "elements": [{"referencedId": "wall"}]},
    )

    objects = load_model(transport, "root")

    assert [obj["id"] for obj in objects] == ["root", "wall", "type"]


def test_load_model_batch_raises_by_default(model):
    with pytest.raises(ObjectNotFoundException):
        load_model_batch(model, ["root", "nope"])


def test_load_model_batch_continues_on_fail(model, caplog):
    settings = PipelineSettings(continue_on_fail=True)

    with caplog.at_level(logging.WARNING):
        results = load_model_batch(model, ["nope", "root"], settings)

    assert results[0]["error"].startswith("Object nope not found")
    assert [obj["id"] for obj in results[1]] == ["root", "wall", "chunk", "material"]
    assert "Load model failed for item 0 (nope)" in caplog.text
