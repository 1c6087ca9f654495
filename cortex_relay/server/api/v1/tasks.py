"""
Task Endpoints.

Read-only view of the tasks currently in flight, plus cancellation. Tasks are
only visible while they are pending or executing; finished tasks are removed
from the registry.
"""

from fastapi import APIRouter, HTTPException

from cortex_relay.core.logging_config import get_logger
from cortex_relay.server.schemas import TaskList, TaskView
from cortex_relay.server.services.deps import SequencerDep

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/",
    response_model=TaskList,
    summary="List Tasks",
    description="List every task that is still pending or executing, in submission order.",
    response_description="The in-flight tasks.",
)
async def list_tasks(sequencer: SequencerDep):
    tasks = await sequencer.list_tasks()
    return TaskList(tasks=[TaskView.from_task(task) for task in tasks], count=len(tasks))


@router.get(
    "/{task_id}",
    response_model=TaskView,
    summary="Get Task",
    description="Retrieve one in-flight task by its identifier.",
    response_description="The task.",
)
async def get_task(task_id: str, sequencer: SequencerDep):
    task = await sequencer.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskView.from_task(task)


@router.delete(
    "/{task_id}",
    response_model=TaskView,
    summary="Cancel Task",
    description="Fail and remove an in-flight task. The extension is not notified.",
    response_description="The cancelled task.",
)
async def cancel_task(task_id: str, sequencer: SequencerDep):
    """
    Cancel a task.

    The task is marked ``failed`` with reason ``cancelled`` and removed from the
    registry; outcomes reported for it afterwards are dropped.
    """
    task = await sequencer.cancel(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info(f"Task {task_id} cancelled via API")
    return TaskView.from_task(task)
