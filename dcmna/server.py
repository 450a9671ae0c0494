"""HTTP front end: forwards circuit payloads to the solver and relays JSON back.

Routes:
    POST /api/simulate           normalized payload (nodeCount, resistors, ...)
    POST /api/simulate/netlist   named-node netlist, normalized server-side
    GET  /api/health             liveness
    GET  /api/test/health        liveness with timestamp
    POST /api/test/echo          echo a message
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

from .config import Settings, load_settings
from .errors import InvalidTopology, SingularMatrix
from .solver import simulate
from .topology import Element, normalize

logger = logging.getLogger(__name__)

# Strict types keep JSON true/"1" from being coerced into node indices or values
Number = Union[StrictInt, StrictFloat]
Label = Union[StrictInt, StrictStr]


class ResistorModel(BaseModel):
    n1: StrictInt
    n2: StrictInt
    value: Number = Field(..., description="Ohms")


class VoltageSourceModel(BaseModel):
    nPlus: StrictInt
    nMinus: StrictInt
    value: Number = Field(..., description="Volts")


class ResistorMapEntry(BaseModel):
    compId: StrictInt
    n1: StrictInt
    n2: StrictInt
    value: Number


class VoltageSourceMapEntry(BaseModel):
    compId: StrictInt
    nPlus: StrictInt
    nMinus: StrictInt
    value: Number


class CircuitRequest(BaseModel):
    nodeCount: StrictInt = Field(..., description="Number of nodes including ground (node 0)")
    resistors: List[ResistorModel] = Field(default_factory=list)
    voltageSources: List[VoltageSourceModel] = Field(default_factory=list)
    resistorMap: Optional[Dict[str, ResistorMapEntry]] = None
    voltageSourceMap: Optional[Dict[str, VoltageSourceMapEntry]] = None


class NetlistComponent(BaseModel):
    type: str = Field(..., description="R or V")
    name: str = Field(..., description="Unique identifier like R1, V1")
    n1: Label = Field(..., description="First / positive terminal")
    n2: Label = Field(..., description="Second / negative terminal")
    value: Number = Field(..., description="Ohms for R, Volts for V")


class NetlistRequest(BaseModel):
    ground: Optional[Label] = None
    components: List[NetlistComponent]


class EchoRequest(BaseModel):
    message: Optional[str] = None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="dcmna",
        description="Modified Nodal Analysis DC solver for resistor/voltage-source circuits.",
    )

    app.add_middleware(
        CORSMiddleware,
        **settings.cors_options(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("[request] %s %s - origin: %s",
                    request.method, request.url.path, request.headers.get("origin"))
        return await call_next(request)

    @app.exception_handler(InvalidTopology)
    async def invalid_topology(request: Request, exc: InvalidTopology):
        logger.warning("Rejected circuit: %s", exc)
        return JSONResponse(status_code=400, content=exc.to_json())

    @app.exception_handler(SingularMatrix)
    async def singular_matrix(request: Request, exc: SingularMatrix):
        logger.warning("Unsolvable circuit: %s", exc)
        return JSONResponse(status_code=422, content=exc.to_json())

    @app.post("/api/simulate")
    def simulate_circuit(body: CircuitRequest):
        return simulate(body.model_dump(exclude_none=True))

    @app.post("/api/simulate/netlist")
    def simulate_netlist(body: NetlistRequest):
        normalized = normalize(
            (Element(c.type, c.name, c.n1, c.n2, c.value) for c in body.components),
            ground=body.ground,
        )
        return normalized.relabel(normalized.solve())

    @app.get("/api/health")
    def health():
        return {"status": "Server is running"}

    @app.get("/api/test/health")
    def test_health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": "Backend is running",
        }

    @app.post("/api/test/echo")
    def echo(body: EchoRequest):
        return {
            "received": body.message,
            "echo": f"Echo: {body.message}",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
