from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from visits_app.services.query_service import QueryGateway
from visits_app.dependencies import get_query_gateway

router = APIRouter(tags=["query"])


@router.get("/query")
def run_query(
    q: Optional[str] = Query(None, description="Catalog query name (default: 'default')"),
    host: Optional[str] = Query(None, description="Restrict results to one host"),
    gateway: QueryGateway = Depends(get_query_gateway)
):
    """
    Run a named aggregate query against the analytics engine.

    Sync on purpose: the engine call is blocking I/O, so FastAPI runs this
    in its threadpool. The engine's JSON is passed through unchanged.
    """
    status_code, body = gateway.run(q, host)
    return JSONResponse(status_code=status_code, content=body)
