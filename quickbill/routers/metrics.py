from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from quickbill.dependencies.depend import permission_required


router = APIRouter(tags=["Metrics"], include_in_schema=False)


@router.get("/metrics", dependencies=[Depends(permission_required("can_view_metrics"))])
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
