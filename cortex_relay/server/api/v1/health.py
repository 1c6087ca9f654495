"""
Health Check Endpoints.

Liveness and version probes for deployments. ``/health`` also says which
planning mode came up and how many tasks are currently in flight.
"""

from fastapi import APIRouter

from cortex_relay.server.services.deps import SequencerDep, get_planner

from ...core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Report relay status, the active planning mode and the number of in-flight tasks.",
    response_description="Status object.",
)
async def health_check(sequencer: SequencerDep):
    """
    Health check endpoint.

    ``planner`` is ``llm+rules`` once the LLM planner passed its startup check
    and ``rules`` otherwise.
    """
    tasks = await sequencer.list_tasks()
    return {
        "status": "ok",
        "planner": "llm+rules" if get_planner().oracle_enabled else "rules",
        "tasks_in_flight": len(tasks),
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Relay release and wire protocol version.",
    response_description="Version object.",
)
async def version():
    return {"version": constant.VERSION, "protocol_version": constant.PROTOCOL_VERSION}
