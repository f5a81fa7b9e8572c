"""
Tests for the handle table, the host bridge and the HTTP surface.
"""

import json
import sys
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from fastapi.testclient import TestClient

from noisetree.engine import GridManager, create_initial_tree
from noisetree.errors import StaleHandleError
from noisetree.interop import HostBridge, TreeHandleTable, parse_path
from noisetree.interop.api import create_app
from noisetree.render import render_frames
from noisetree.render.grid_render import main as render_main

LEAF = {"Leaf": {"module_type": "Constant", "module_conf": [{"Constant": {"constant": 0.5}}], "transformations": []}}
IR_LEAF = {
    "type": "noiseModule",
    "settings": [{"key": "moduleType", "value": "Constant"}, {"key": "constant", "value": "-0.5"}],
    "children": []
}
TREE = {
    "global_conf": {},
    "root_node": {"Composed": {"scheme": "Average", "children": [LEAF], "transformations": []}}
}


# Handle table

def test_stale_handles_are_rejected():
    table = TreeHandleTable()
    handle = table.insert(create_initial_tree())

    table.release(handle)

    assert handle not in table
    with pytest.raises(StaleHandleError):
        table.get(handle)
    with pytest.raises(StaleHandleError):
        table.release(handle)


def test_reused_slot_gets_new_handle():
    table = TreeHandleTable()
    first_tree = create_initial_tree()
    first = table.insert(first_tree)
    table.release(first)

    second_tree = create_initial_tree()
    second = table.insert(second_tree)

    assert second != first
    assert table.get(second) is second_tree
    with pytest.raises(StaleHandleError):
        table.get(first)
    assert len(table) == 1


def test_never_issued_handles_are_rejected():
    table = TreeHandleTable()

    with pytest.raises(StaleHandleError):
        table.get(0)
    with pytest.raises(StaleHandleError):
        table.get(-3)


# Bridge

def test_bridge_edit_cycle():
    bridge = HostBridge()
    handle = bridge.create_tree(json.dumps(TREE)).handle

    assert bridge.evaluate(handle, 1.0, 2.0, 3.0).value == pytest.approx(0.5)

    result = bridge.add_node(handle, "[]", 1, json.dumps(IR_LEAF))
    assert result.success
    assert bridge.evaluate(handle, 0.0, 0.0, 0.0).value == pytest.approx(0.0)

    assert bridge.replace_node(handle, [], 1, json.dumps(LEAF)).success
    assert bridge.evaluate(handle, 0.0, 0.0, 0.0).value == pytest.approx(0.5)

    assert bridge.delete_node(handle, [], 1).success
    assert len(bridge.table.get(handle).root_node.children) == 1


def test_bridge_reports_errors_without_raising():
    bridge = HostBridge()
    handle = bridge.create_tree(TREE).handle

    result = bridge.add_node(handle, [0], 0, LEAF)
    assert not result.success
    assert result.error_kind == "LeafMutationError"
    assert "leaf" in result.error

    result = bridge.delete_node(handle, [], 3)
    assert result.error_kind == "IndexOutOfRange"

    result = bridge.add_node(handle, [], 0, "{not json")
    assert result.error_kind == "ParseError"
    assert len(bridge.table.get(handle).root_node.children) == 1

    result = bridge.create_tree({"root_node": {"Leaf": {"module_type": "Nope"}}})
    assert result.error_kind == "ConfigError"


def test_bridge_scheme_mismatch_surfaces_on_evaluate():
    bridge = HostBridge()
    handle = bridge.create_tree(TREE).handle

    assert bridge.set_composition_scheme(handle, [], {"WeightedAverage": [0.5, 0.5]}).success

    result = bridge.evaluate(handle, 0.0, 0.0, 0.0)
    assert result.error_kind == "SchemeMismatchError"


def test_bridge_transformations_and_global_conf():
    bridge = HostBridge()
    handle = bridge.create_initial_tree().handle

    assert bridge.add_input_transformation(handle, [0], {"ScaleAll": 2.0}).success
    assert bridge.replace_input_transformation(handle, [0], 0, {
        "type": "inputTransformation",
        "settings": [
            {"key": "inputTransformationType", "value": "zoomScale"},
            {"key": "speed", "value": "1"},
            {"key": "zoom", "value": "3"}
        ],
        "children": []
    }).success
    assert bridge.delete_input_transformation(handle, [0], 0).success
    assert not bridge.delete_input_transformation(handle, [0], 0).success

    result = bridge.set_global_conf(handle, {
        "type": "globalConf",
        "settings": [{"key": "zoom", "value": "0.5"}],
        "children": []
    })
    assert result.success
    assert bridge.table.get(handle).global_conf.zoom == pytest.approx(0.5)


def test_bridge_rejects_released_handle():
    bridge = HostBridge()
    handle = bridge.create_initial_tree().handle

    assert bridge.release_tree(handle).success

    result = bridge.evaluate(handle, 0.0, 0.0, 0.0)
    assert not result.success
    assert result.error_kind == "StaleHandleError"


class SlowSlots(list):
    """Slot list whose length lookup yields to other threads."""

    def __len__(self):
        time.sleep(0.05)
        return super().__len__()


def _slow_table() -> TreeHandleTable:
    table = TreeHandleTable()
    table._trees = SlowSlots()
    return table


def test_concurrent_creates_get_distinct_handles():
    bridge = HostBridge(_slow_table())

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: bridge.create_initial_tree(), range(4)))

    handles = [result.handle for result in results]
    assert all(result.success for result in results)
    assert len(set(handles)) == 4
    assert len(bridge.table) == 4


def test_parse_path():
    assert parse_path("[1, 0]") == [1, 0]
    assert parse_path("") == []
    assert parse_path((2,)) == [2]


# HTTP surface

@pytest.fixture
def client():
    return TestClient(create_app())


def test_health_and_generators(client):
    assert client.get("/health").json()["status"] == "healthy"

    generators = client.get("/generators").json()["generators"]
    names = [g["name"] for g in generators]
    assert names[0] == "Fbm"
    assert "Constant" in names
    fbm = generators[0]
    assert fbm["fragments"] == ["MultiFractal", "Seedable"]


def test_http_edit_cycle(client):
    response = client.post("/trees", json={"definition": TREE})
    assert response.status_code == 200
    handle = response.json()["handle"]

    response = client.get(f"/trees/{handle}/evaluate", params={"x": 1, "y": 2, "z": 3})
    assert response.json()["value"] == pytest.approx(0.5)

    response = client.post(f"/trees/{handle}/nodes/add", json={"path": [], "index": 0, "definition": IR_LEAF})
    assert response.json()["success"] is True

    response = client.put(f"/trees/{handle}/scheme", json={"path": [], "definition": {"WeightedAverage": [1.0, 0.0]}})
    assert response.status_code == 200
    assert client.get(f"/trees/{handle}/evaluate").json()["value"] == pytest.approx(-0.5)

    response = client.post(f"/trees/{handle}/transformations/add", json={"path": [0], "definition": {"ScaleAll": 2.0}})
    assert response.status_code == 200

    response = client.put(f"/trees/{handle}/global_conf", json={"definition": {"zoom": 0.1}})
    assert response.status_code == 200

    response = client.post(f"/trees/{handle}/nodes/delete", json={"path": [], "index": 5})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": response.json()["error"]}

    assert client.delete(f"/trees/{handle}").status_code == 200


def test_http_unknown_handle_is_404(client):
    handle = client.post("/trees/initial").json()["handle"]
    client.delete(f"/trees/{handle}")

    response = client.get(f"/trees/{handle}/evaluate")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_http_bad_definition_is_400(client):
    response = client.post("/trees", json={"definition": {"root_node": {"Composite": {}}}})

    assert response.status_code == 400
    assert "error" in response.json()



def test_http_concurrent_creates_get_distinct_handles():
    client = TestClient(create_app(HostBridge(_slow_table())))

    with ThreadPoolExecutor(max_workers=2) as pool:
        responses = list(pool.map(lambda _: client.post("/trees/initial"), range(2)))

    handles = [response.json()["handle"] for response in responses]
    assert len(set(handles)) == 2
    assert client.get("/health").json()["live_trees"] == 2

# Grid sampling

def test_grid_manager_samples_canvas():
    tree = create_initial_tree()
    grid = GridManager(8)

    frame = grid.sample(tree, sequence=2.0)

    assert frame.shape == (8, 8)
    assert frame[3, 5] == pytest.approx(tree.evaluate(5.0, 3.0, 2.0))


def test_render_frames(tmp_path):
    definition = tmp_path / "tree.json"
    definition.write_text(json.dumps(TREE))

    frames = render_frames(definition, size=4, frames=3, show_progress=False)

    assert frames.shape == (3, 4, 4)
    np.testing.assert_allclose(frames, 0.5)


def test_render_frames_uses_tree_canvas_size(tmp_path):
    definition = tmp_path / "tree.json"
    definition.write_text(json.dumps(dict(TREE, global_conf={"canvas_size": 3})))

    frames = render_frames(definition, show_progress=False)

    assert frames.shape == (1, 3, 3)


def test_render_cli_rejects_zero_frames(tmp_path, monkeypatch):
    definition = tmp_path / "tree.json"
    definition.write_text(json.dumps(TREE))
    monkeypatch.setattr(sys, "argv", ["noisetree-render", str(definition), "--frames", "0"])

    with pytest.raises(SystemExit) as exc_info:
        render_main()

    assert exc_info.value.code == 2


def test_render_cli_writes_frames(tmp_path, monkeypatch):
    definition = tmp_path / "tree.json"
    definition.write_text(json.dumps(TREE))
    output = tmp_path / "frames.npy"
    monkeypatch.setattr(sys, "argv", [
        "noisetree-render", str(definition), "--size", "4", "--frames", "2", "-o", str(output)
    ])

    assert render_main() == 0

    frames = np.load(output)
    assert frames.shape == (2, 4, 4)
    assert frames.dtype == np.float32
