"""HTTP layer: FastAPI application, middleware and routers."""
