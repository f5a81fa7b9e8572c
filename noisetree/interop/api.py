"""
FastAPI server for composition trees.

Exposes the host bridge over HTTP so an editor can build a tree, edit it
between evaluation passes and sample it, addressing trees by handle.
"""

import argparse
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from ..procgen import default_catalog
from .bridge import BridgeResult, HostBridge

logger = logging.getLogger(__name__)


# Pydantic models for API
class TreeRequest(BaseModel):
    definition: Any = Field(..., description="Tree definition, tagged or IR, as JSON object or text")


class NodeRequest(BaseModel):
    path: List[int] = Field(default_factory=list, description="Child indices from the root")
    index: int = Field(..., description="Child index within the addressed composed node")
    definition: Any = Field(..., description="Node definition, tagged or IR")


class NodeDeleteRequest(BaseModel):
    path: List[int] = Field(default_factory=list, description="Child indices from the root")
    index: int = Field(..., description="Child index within the addressed composed node")


class SchemeRequest(BaseModel):
    path: List[int] = Field(default_factory=list, description="Child indices from the root")
    definition: Any = Field(..., description="Composition scheme, tagged or IR")


class TransformationRequest(BaseModel):
    path: List[int] = Field(default_factory=list, description="Child indices from the root")
    index: Optional[int] = Field(None, description="Position in the node's transformation list")
    definition: Any = Field(None, description="Input transformation, tagged or IR")


class GlobalConfRequest(BaseModel):
    definition: Any = Field(..., description="`globalConf` IR node or plain global conf object")


class HealthResponse(BaseModel):
    status: str
    live_trees: int


class GeneratorsResponse(BaseModel):
    generators: List[Dict[str, Any]]


def _respond(result: BridgeResult):
    if result.success:
        return result
    status_code = 404 if result.error_kind == "StaleHandleError" else 400
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(include={"success", "error"}),
    )


def create_app(bridge: Optional[HostBridge] = None, cors_origins: Optional[List[str]] = None) -> FastAPI:
    """Create FastAPI application."""

    bridge = bridge if bridge is not None else HostBridge()

    app = FastAPI(
        title="noisetree API",
        description="Build, edit and sample noise composition trees",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Configure CORS
    if cors_origins is None:
        cors_origins = ["*"]  # Allow all origins for development

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        return HealthResponse(status="healthy", live_trees=len(bridge.table))

    @app.get("/generators", response_model=GeneratorsResponse)
    async def get_generators():
        """Generator kinds and the configuration fragments each accepts."""
        registry = default_catalog.registry
        return GeneratorsResponse(generators=[
            {
                "id": module_id,
                "name": name,
                "fragments": [cls.fragment for cls in registry.get_accepted_fragments(name)]
            }
            for module_id, name in sorted(registry.list_modules())
        ])

    @app.post("/trees", response_model=BridgeResult)
    async def create_tree(request: TreeRequest):
        """Build a tree from a definition and return its handle."""
        return _respond(bridge.create_tree(request.definition))

    @app.post("/trees/initial", response_model=BridgeResult)
    async def create_initial_tree():
        """Build the default tree and return its handle."""
        return _respond(bridge.create_initial_tree())

    @app.delete("/trees/{handle}", response_model=BridgeResult)
    async def release_tree(handle: int):
        return _respond(bridge.release_tree(handle))

    @app.get("/trees/{handle}/evaluate", response_model=BridgeResult)
    async def evaluate(
        handle: int,
        x: float = Query(0.0, description="Canvas X coordinate"),
        y: float = Query(0.0, description="Canvas Y coordinate"),
        z: float = Query(0.0, description="Sequence number")
    ):
        """Sample the tree at one canvas coordinate."""
        return _respond(bridge.evaluate(handle, x, y, z))

    @app.post("/trees/{handle}/nodes/add", response_model=BridgeResult)
    async def add_node(handle: int, request: NodeRequest):
        return _respond(bridge.add_node(handle, request.path, request.index, request.definition))

    @app.post("/trees/{handle}/nodes/delete", response_model=BridgeResult)
    async def delete_node(handle: int, request: NodeDeleteRequest):
        return _respond(bridge.delete_node(handle, request.path, request.index))

    @app.post("/trees/{handle}/nodes/replace", response_model=BridgeResult)
    async def replace_node(handle: int, request: NodeRequest):
        return _respond(bridge.replace_node(handle, request.path, request.index, request.definition))

    @app.put("/trees/{handle}/scheme", response_model=BridgeResult)
    async def set_composition_scheme(handle: int, request: SchemeRequest):
        return _respond(bridge.set_composition_scheme(handle, request.path, request.definition))

    @app.post("/trees/{handle}/transformations/add", response_model=BridgeResult)
    async def add_input_transformation(handle: int, request: TransformationRequest):
        return _respond(bridge.add_input_transformation(
            handle, request.path, request.definition, request.index
        ))

    @app.post("/trees/{handle}/transformations/delete", response_model=BridgeResult)
    async def delete_input_transformation(handle: int, request: TransformationRequest):
        if request.index is None:
            return _respond(BridgeResult(success=False, error="`index` is required to delete a transformation"))
        return _respond(bridge.delete_input_transformation(handle, request.path, request.index))

    @app.post("/trees/{handle}/transformations/replace", response_model=BridgeResult)
    async def replace_input_transformation(handle: int, request: TransformationRequest):
        if request.index is None:
            return _respond(BridgeResult(success=False, error="`index` is required to replace a transformation"))
        return _respond(bridge.replace_input_transformation(
            handle, request.path, request.index, request.definition
        ))

    @app.put("/trees/{handle}/global_conf", response_model=BridgeResult)
    async def set_global_conf(handle: int, request: GlobalConfRequest):
        return _respond(bridge.set_global_conf(handle, request.definition))

    return app


def main():
    """CLI entry point for API server."""

    parser = argparse.ArgumentParser(description="noisetree API Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind server")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind server")
    parser.add_argument("--log-level", default="info", help="Log level for server and library")

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    print("Starting noisetree API server...")
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Docs: http://{args.host}:{args.port}/docs")

    app = create_app()

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=args.log_level
    )


if __name__ == "__main__":
    main()
