"""Write the OpenAPI document to interfaces/openapi.json (all REST routes are under /api/v1)."""

import json
import os

from pipetrack.api.main import app


# PUBLIC_INTERFACE
def main(output_dir: str = "interfaces") -> str:
    """Render the OpenAPI schema to <output_dir>/openapi.json and return the path."""
    openapi_schema = app.openapi()

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, "openapi.json")

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(openapi_schema, f, indent=2, ensure_ascii=False)
    return output_path


if __name__ == "__main__":
    main()
