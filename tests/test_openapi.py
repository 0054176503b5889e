import json

from pipetrack.api import generate_openapi


def test_openapi_document_lists_routes(tmp_path):
    path = generate_openapi.main(str(tmp_path))
    with open(path, encoding="utf-8") as f:
        doc = json.load(f)
    paths = doc["paths"]
    for route in (
        "/api/v1/orders",
        "/api/v1/orders/{order_id}/recompute",
        "/api/v1/production/records",
        "/api/v1/shipping/records",
        "/api/v1/plans",
        "/api/v1/master-data/{category}",
        "/api/v1/reports/progress/export",
        "/api/v1/auth/login",
    ):
        assert route in paths
