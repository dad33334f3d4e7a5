import pathlib
import sys

import pytest
from flask import Flask, jsonify, request


ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def echo_app():
    """Flask app that reports the request headers it received."""

    app = Flask("headers-echo")
    app.config["TESTING"] = True
    calls = []

    @app.route("/foo", methods=["GET", "POST", "OPTIONS"])
    def foo():
        calls.append(request.method)
        resp = jsonify({"headers": {k: v for k, v in request.headers.items()}})
        resp.headers["X-Upstream"] = "kept"
        resp.headers["Server"] = "echo"
        return resp

    app.calls = calls  # type: ignore[attr-defined]
    return app
