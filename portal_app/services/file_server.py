from __future__ import annotations
import os
import threading
from flask import Flask, abort, send_from_directory
from ..config import FILE_SERVER_PORT, UPLOAD_DIR

_app = Flask("portal-file-server")
_started = False
_lock = threading.Lock()


@_app.get("/healthz")
def healthz():
    return {"status": "ok"}


@_app.get("/storage/<bucket>/<path:filename>")
def serve_blob(bucket, filename):
    if bucket.startswith("."):
        abort(404)
    return send_from_directory(os.path.abspath(UPLOAD_DIR), f"{bucket}/{filename}", as_attachment=False, max_age=0)


def start_once() -> None:
    global _started
    with _lock:
        if _started:
            return
        def _run():
            _app.run(host="0.0.0.0", port=FILE_SERVER_PORT, debug=False, use_reloader=False)
        threading.Thread(target=_run, daemon=True).start()
        _started = True
