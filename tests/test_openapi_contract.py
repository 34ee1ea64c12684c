import json
from pathlib import Path

from retail_ledger.main import app


def test_openapi_paths_snapshot():
    snapshot_path = Path(__file__).parent / "snapshots" / "openapi_paths_snapshot.json"
    expected_paths = json.loads(snapshot_path.read_text(encoding="utf-8"))
    actual_paths = sorted(app.openapi()["paths"].keys())
    assert actual_paths == expected_paths


def test_batch_endpoints_document_error_envelope():
    paths = app.openapi()["paths"]
    for path in ("/warehouse/outflows", "/sales-area/movements", "/sales-area/sales", "/sales-area/withdrawals"):
        responses = paths[path]["post"]["responses"]
        assert {"400", "404", "409", "422", "500"} <= set(responses)
        assert responses["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorOut")
