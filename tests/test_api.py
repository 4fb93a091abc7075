import math

import pytest


def test_health(client):
    r = client.get('/')
    assert r.status_code == 200
    assert "online" in r.get_json()["status"]


def test_evaluate(client):
    r = client.post('/evaluate', json={"expression": "2x^2 + 1", "value": "3"})
    assert r.status_code == 200
    assert r.get_json()["result"] == "19"

    r = client.post('/evaluate', json={"expression": "sin(x)", "value": "pi/6"})
    assert r.get_json()["result"] == "0.5"


@pytest.mark.parametrize("payload", [
    {},
    {"expression": "x +* 1", "value": 1},
    {"expression": "1/x", "value": 0},
    {"expression": "x", "value": "abc("},
])
def test_evaluate_rejects_bad_input(client, payload):
    r = client.post('/evaluate', json=payload)
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_solve(client):
    r = client.post('/solve', json={"equation": "x^2 - 4 = 0"})
    assert r.status_code == 200
    assert r.get_json() == {"input": "x^2 - 4 = 0", "variable": "x", "roots": ["-2", "2"]}


def test_solve_no_solution_and_parse_error(client):
    r = client.post('/solve', json={"equation": "x^2 + 1 = 0"})
    assert r.status_code == 200
    assert r.get_json()["error"] == "no solution found"
    assert r.get_json()["roots"] == []

    r = client.post('/solve', json={"equation": "x +* 2 = 1"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "cannot parse the expression"

    assert client.post('/solve', json={"equation": "  "}).status_code == 400


def test_zeros(client):
    r = client.post('/zeros', json={"expression": "sin(x)", "a": "-pi/2", "b": "7"})
    body = r.get_json()
    assert r.status_code == 200
    assert body["variable"] == "x"
    assert body["zeros"] == pytest.approx([0, math.pi, 2 * math.pi], abs=1e-9)


def test_zeros_with_domain_and_rounding(client):
    r = client.post('/zeros', json={
        "expression": "x^2 - 2", "a": -3, "b": 3,
        "domain": {"min": 0}, "round_final": True,
    })
    assert r.get_json()["zeros"] == [1.414]


def test_zeros_validation(client):
    assert client.post('/zeros', json={"expression": "x"}).status_code == 400
    r = client.post('/zeros', json={"expression": "x", "a": -1, "b": 1, "steps": 0})
    assert r.status_code == 400
    r = client.post('/zeros', json={"expression": "x)", "a": -1, "b": 1})
    assert r.status_code == 400
    assert r.get_json()["error"].startswith("Invalid mathematical expression")


def test_extrema(client):
    r = client.post('/extrema', json={"expression": "x^3 - 3x", "a": -3, "b": 3})
    ext = r.get_json()["extrema"]
    assert [e["kind"] for e in ext] == ["max", "min"]
    assert ext[0]["x"] == pytest.approx(-1, abs=1e-6)
    assert ext[0]["y"] == pytest.approx(2, abs=1e-9)


def test_tangent(client):
    r = client.post('/tangent', json={"expression": "x^2", "x": 3})
    t = r.get_json()["tangent"]
    assert t["slope"] == pytest.approx(6, abs=1e-6)
    assert t["equation"] == "y = 6𝑥 − 9"

    r = client.post('/tangent', json={"expression": "sqrt(x)", "x": -1})
    assert r.get_json() == {"tangent": None}


def test_tangent_snap(client):
    r = client.post('/tangent', json={
        "expression": "x^2 - 1", "x": 0.9, "snap": True, "a": -4, "b": 4, "scale": 50,
    })
    assert r.get_json()["tangent"]["x"] == pytest.approx(1, abs=1e-9)
    assert client.post('/tangent', json={"expression": "x", "x": 0, "snap": True}).status_code == 400


def test_antiderivative(client):
    r = client.post('/antiderivative', json={"expression": "2x", "a": -2, "b": 2, "count": 40})
    body = r.get_json()
    assert body["integrable"] is True
    assert len(body["xs"]) == 41
    assert body["origin_index"] == 20
    assert body["values"][20] == 0.0
    assert body["values"][-1] == pytest.approx(4)


def test_antiderivative_not_integrable(client):
    r = client.post('/antiderivative', json={"expression": "1/x", "a": -1, "b": 1, "count": 10})
    body = r.get_json()
    assert body["integrable"] is False
    assert body["values"] == [None] * 11
    assert client.post('/antiderivative', json={"expression": "x", "a": 1, "b": 1}).status_code == 400


def test_derivative_curve(client):
    r = client.post('/derivativeCurve', json={"expression": "x^2", "a": 0, "b": 1, "count": 4})
    pts = r.get_json()["points"]
    assert [p["x"] for p in pts] == [0, 0.25, 0.5, 0.75, 1]
    assert [p["y"] for p in pts] == pytest.approx([0, 0.5, 1, 1.5, 2], abs=1e-6)


def test_analyze(client):
    r = client.post('/analyze', json={
        "functions": [{"expression": "x^2 - 1", "show_integral": True}, {"expression": "(("}],
        "view": {"x_min": -4, "x_max": 4, "width": 200},
        "tangents": {"pinned": [], "preview": {"function": 0, "x": 1.1, "snap": True, "pin": True}},
    })
    assert r.status_code == 200
    body = r.get_json()
    good, bad = body["functions"]
    assert [p["x"] for p in good["roots"]] == pytest.approx([-1, 1], abs=1e-9)
    assert good["antiderivative"]["integrable"] is True
    assert "error" in bad
    assert body["tangents"]["live"]["x"] == pytest.approx(1, abs=1e-9)
    assert len(body["tangents"]["pinned"]) == 1


def test_analyze_validation(client):
    assert client.post('/analyze', json={"functions": []}).status_code == 400
    r = client.post('/analyze', json={"functions": [], "view": {"x_min": 1, "x_max": 1}})
    assert r.status_code == 400
    r = client.post('/analyze', json={
        "functions": [{"expression": "x"}],
        "view": {"x_min": -1, "x_max": 1},
        "tangents": {"preview": {"function": 3, "x": 0}},
    })
    assert r.status_code == 400


def test_graph_routes_plot_in_x(client):
    r = client.post('/zeros', json={"expression": "sinh(x) - 1", "a": -3, "b": 3})
    body = r.get_json()
    assert body["variable"] == "x"
    assert body["zeros"] == pytest.approx([math.asinh(1)], abs=1e-9)

    r = client.post('/extrema', json={"expression": "a*x^2", "a": -1, "b": 1})
    assert r.status_code == 400
