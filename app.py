# graphcalc API: the numeric brain behind the equation solver and the graph view.
# SymPy parses expressions; NumPy / SciPy do the sampling, scanning and integration.
# Every route takes JSON and answers JSON; errors come back as {"error": ...} with 400.

import logging

import numpy as np
from flask import Flask, request, jsonify
from flask_cors import CORS
from sympy import sympify, N, Abs

from graphcalc import (
    FunctionEntry, GraphView, TangentBoard, Domain, SnapTarget, ParseError, EvalError,
    analyze_graph, update_tangents, build_antiderivative, can_integrate, origin_index,
    pixel_grid, compile_expression, compile_function, derivative_many, find_extrema,
    find_roots, solve_equation, tangent_at,
)
from graphcalc import config
from graphcalc.formatting import format_result
from graphcalc.solve import PARSE_ERROR_MESSAGE

app = Flask(__name__)
app.config.from_object(config.Config)
app.config.from_prefixed_env("GRAPHCALC")
CORS(app)

config.configure_logging(app.config["LOG_LEVEL"])
app.logger.setLevel(logging.getLogger().level)

# ---------------------- Request helpers ----------------------
def _maybe_round(x, round_final=False):
    """Return 3-decimal value only if round_final=True; else full precision float."""
    try:
        xf = float(x)
    except Exception:
        return x
    return float(f"{xf:.3f}") if round_final else xf

def _bool(data, key, default=False):
    v = data.get(key, default)
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "y", "t")
    return bool(v)

def _safe_float(x):
    """Accept numbers or constant expressions such as 'pi/2'."""
    return float(N(sympify(str(x), locals={"Abs": Abs})))

def _steps(d, key, default):
    n = int(d.get(key, default))
    if n < 1 or n > app.config["MAX_STEPS"]:
        raise ValueError(f"'{key}' must be between 1 and {app.config['MAX_STEPS']}")
    return n

def _json():
    return request.get_json(silent=True) or {}

def _parse_failed(e):
    return jsonify({"error": f"Invalid mathematical expression provided: {e}"}), 400

# ---------------------- Health Check ----------------------
@app.route('/', methods=['GET'])
def health_check():
    return jsonify({"status": "Graph calculator engine is online and ready!"})

# ---------------------- Evaluate (numeric) ----------------------
@app.route('/evaluate', methods=['POST'])
def evaluate_expression_endpoint():
    d = _json()
    expression = d.get('expression')
    if not expression:
        return jsonify({"error": "Invalid request. Please provide an 'expression'."}), 400
    try:
        expr = compile_expression(expression, d.get('variable'))
        binding = {}
        if d.get('value') is not None:
            binding[expr.variable] = _safe_float(d.get('value'))
        return jsonify({"result": format_result(expr.evaluate(binding))})
    except ParseError as e:
        return _parse_failed(e)
    except EvalError as e:
        return jsonify({"error": f"Evaluation failed: {e}"}), 400
    except Exception as e:
        return jsonify({"error": f"Invalid value provided: {e}"}), 400

# ---------------------- Equation solving ----------------------
@app.route('/solve', methods=['POST'])
def solve():
    d = _json()
    equation = d.get('equation')
    if not equation or not str(equation).strip():
        return jsonify({"error": "Invalid request. Please provide an 'equation'."}), 400
    solution = solve_equation(str(equation).strip())
    if solution.error == PARSE_ERROR_MESSAGE:
        return jsonify(solution.to_dict()), 400
    return jsonify(solution.to_dict())

# ---------------------- Zeros / Extrema ----------------------
@app.route('/zeros', methods=['POST'])
def find_zeros():
    d = _json()
    round_final = _bool(d, "round_final")
    expr_text, a, b = d.get('expression'), d.get('a'), d.get('b')
    if not expr_text or a is None or b is None:
        return jsonify({"error": "Provide 'expression','a','b'."}), 400
    try:
        steps = _steps(d, 'steps', config.SAMPLES)
        a = _safe_float(a); b = _safe_float(b)
        expr = compile_function(expr_text, d.get('variable'))
        domain = Domain.from_dict(d.get('domain'))
        if domain is not None:
            a, b = domain.narrow(a, b)
        roots = [r for r in find_roots(expr, a, b, steps) if domain is None or domain.contains(r)]
        return jsonify({"variable": expr.variable,
                        "zeros": [_maybe_round(r, round_final) for r in roots]})
    except ParseError as e:
        return _parse_failed(e)
    except Exception as e:
        app.logger.exception("zeros failed")
        return jsonify({"error": f"Zero-finding failed: {e}"}), 400

@app.route('/extrema', methods=['POST'])
def extrema():
    d = _json()
    round_final = _bool(d, "round_final")
    expr_text, a, b = d.get('expression'), d.get('a'), d.get('b')
    if not expr_text or a is None or b is None:
        return jsonify({"error": "Provide 'expression','a','b'."}), 400
    try:
        steps = _steps(d, 'steps', config.SAMPLES)
        a = _safe_float(a); b = _safe_float(b)
        expr = compile_function(expr_text, d.get('variable'))
        domain = Domain.from_dict(d.get('domain'))
        if domain is not None:
            a, b = domain.narrow(a, b)
        results = []
        for e in find_extrema(expr, a, b, steps):
            if domain is not None and not domain.contains(e.x):
                continue
            results.append({
                "x": _maybe_round(e.x, round_final),
                "y": _maybe_round(e.y, round_final),
                "kind": e.kind,
            })
        return jsonify({"variable": expr.variable, "extrema": results})
    except ParseError as e:
        return _parse_failed(e)
    except Exception as e:
        app.logger.exception("extrema failed")
        return jsonify({"error": f"Extrema search failed: {e}"}), 400

# ---------------------- Tangent line ----------------------
@app.route('/tangent', methods=['POST'])
def tangent():
    d = _json()
    expr_text, x = d.get('expression'), d.get('x')
    if not expr_text or x is None:
        return jsonify({"error": "Provide 'expression' and 'x'."}), 400
    try:
        expr = compile_function(expr_text, d.get('variable'))
        snap = None
        if _bool(d, "snap"):
            a, b, scale = d.get('a'), d.get('b'), d.get('scale')
            if a is None or b is None or scale is None:
                return jsonify({"error": "Snapping needs 'a','b','scale'."}), 400
            snap = SnapTarget(_safe_float(a), _safe_float(b), _safe_float(scale))
        t = tangent_at(expr, _safe_float(x), snap=snap)
        return jsonify({"tangent": t.to_dict() if t else None})
    except ParseError as e:
        return _parse_failed(e)
    except Exception as e:
        app.logger.exception("tangent failed")
        return jsonify({"error": f"Tangent failed: {e}"}), 400

# ---------------------- Antiderivative / derivative curves ----------------------
@app.route('/antiderivative', methods=['POST'])
def antiderivative():
    d = _json()
    expr_text, a, b = d.get('expression'), d.get('a'), d.get('b')
    if not expr_text or a is None or b is None:
        return jsonify({"error": "Provide 'expression','a','b'."}), 400
    try:
        count = _steps(d, 'count', config.VIEW_WIDTH)
        a = _safe_float(a); b = _safe_float(b)
        if b <= a:
            return jsonify({"error": "'b' must be greater than 'a'."}), 400
        expr = compile_function(expr_text, d.get('variable'))
        xs = pixel_grid(a, b, count, step=1)
        origin = origin_index(xs)
        integrable = can_integrate(expr)
        values = build_antiderivative(expr, xs, origin, Domain.from_dict(d.get('domain'))) \
            if integrable else [None] * len(xs)
        return jsonify({"xs": [float(v) for v in xs], "values": values,
                        "origin_index": origin, "integrable": integrable})
    except ParseError as e:
        return _parse_failed(e)
    except Exception as e:
        app.logger.exception("antiderivative failed")
        return jsonify({"error": f"Antiderivative failed: {e}"}), 400

@app.route('/derivativeCurve', methods=['POST'])
def derivative_curve():
    d = _json()
    expr_text, a, b = d.get('expression'), d.get('a'), d.get('b')
    if not expr_text or a is None or b is None:
        return jsonify({"error": "Provide 'expression','a','b'."}), 400
    try:
        count = _steps(d, 'count', config.VIEW_WIDTH)
        a = _safe_float(a); b = _safe_float(b)
        expr = compile_function(expr_text, d.get('variable'))
        xs = pixel_grid(a, b, count, step=1)
        ds = derivative_many(expr, xs, config.TANGENT_H)
        points = [{"x": float(x), "y": (float(v) if np.isfinite(v) else None)} for x, v in zip(xs, ds)]
        return jsonify({"points": points})
    except ParseError as e:
        return _parse_failed(e)
    except Exception as e:
        app.logger.exception("derivativeCurve failed")
        return jsonify({"error": f"Derivative curve failed: {e}"}), 400

# ---------------------- Whole-frame graph analysis ----------------------
@app.route('/analyze', methods=['POST'])
def analyze():
    """
    One call per redraw. JSON:
      {"functions": [{"expression": "x^2-1", "show_integral": true,
                      "domain": {"min": -2, "max": 2, "max_open": true}}],
       "view": {"x_min": -8, "x_max": 8, "width": 800, "scale": 50},
       "tangents": {"pinned": [...], "preview": {"function": 0, "x": 1.2,
                                                 "snap": true, "pin": false}}}
    Pinned tangents are echoed back (plus any newly pinned one); the client keeps them.
    """
    d = _json()
    functions, view = d.get('functions'), d.get('view')
    if not isinstance(functions, list) or not isinstance(view, dict):
        return jsonify({"error": "Provide 'functions' (list) and 'view' (object)."}), 400
    try:
        view = GraphView.from_dict(view)
        if view.x_max <= view.x_min:
            return jsonify({"error": "View 'x_max' must be greater than 'x_min'."}), 400
        entries = [FunctionEntry.from_dict(f) for f in functions]

        board = None
        if 'tangents' in d:
            board = TangentBoard.from_dict(d.get('tangents'))
            preview = (d.get('tangents') or {}).get('preview')
            if preview:
                index = int(preview.get('function', 0))
                if not 0 <= index < len(entries):
                    return jsonify({"error": f"No function at index {index}."}), 400
                update_tangents(board, entries, view, index, _safe_float(preview.get('x')),
                                snap=_bool(preview, 'snap'), pin=_bool(preview, 'pin'))
        return jsonify(analyze_graph(entries, view, board))
    except Exception as e:
        app.logger.exception("analyze failed")
        return jsonify({"error": f"Graph analysis failed: {e}"}), 400


# ---------------------- Run ----------------------
if __name__ == '__main__':
    # In production behind Gunicorn, this block is ignored.
    app.run(host=app.config["HOST"], port=int(app.config["PORT"]))
