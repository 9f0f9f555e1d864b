"""
api/routes/v1/tasks.py -- Task CRUD routes for the TaskGuard REST API.

Routes:
  GET    /tasks            -- admins see every task, users see their own
  POST   /tasks            -- create a task owned by the caller
  GET    /tasks/{task_id}  -- read one task (owner or admin)
  PUT    /tasks/{task_id}  -- rename a task (owner or admin)
  DELETE /tasks/{task_id}  -- delete a task (owner or admin)

Ownership:
  owner_id is copied from the verified token at creation, never from the
  request body. Per-record routes load the task first and hand it to
  authorize_owned(), which reports 404 for a missing task before it checks
  ownership, so every caller sees the same 404 for a nonexistent id.
"""

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, TaskCreate, TaskResponse, TaskUpdate
from auth.dependencies import get_current_identity
from auth.errors import ValidationError
from auth.models import IdentityClaim
from auth.policy import authorize_owned
from tasks.models import Task
from tasks.store import TaskStore

# All task routes require authentication (any role). Ownership is checked
# per record inside the handlers.
router = APIRouter()

# Largest value SQLite can store in an INTEGER column.
_MAX_TASK_ID = 2**63 - 1


def _load_authorized(request: Request, task_id: str | int, identity: IdentityClaim) -> Task:
    """Load a task by path id and apply the ownership policy.

    Ids are taken as strings so a non-numeric id is simply a task that does
    not exist (404), not a schema error.
    """
    task_store: TaskStore = request.app.state.task_store
    task = None
    if str(task_id).isdecimal() and int(task_id) <= _MAX_TASK_ID:
        task = task_store.get_task(int(task_id))
    return authorize_owned(identity, task, kind="Task")


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(
    request: Request,
    identity: IdentityClaim = Depends(get_current_identity),
) -> list[TaskResponse]:
    task_store: TaskStore = request.app.state.task_store
    if identity.is_admin:
        tasks = task_store.list_tasks()
    else:
        tasks = task_store.list_tasks_for_owner(identity.subject_id)
    return [TaskResponse.from_task(t) for t in tasks]


@router.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: Request,
    body: TaskCreate,
    identity: IdentityClaim = Depends(get_current_identity),
) -> TaskResponse:
    """Create a task owned by the authenticated caller."""
    if not body.title:
        raise ValidationError("Title required.", code="title_required")
    task_store: TaskStore = request.app.state.task_store
    task_id = task_store.create_task(Task(title=body.title, owner_id=identity.subject_id))
    return TaskResponse.from_task(task_store.get_task(task_id))


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    request: Request,
    task_id: str,
    identity: IdentityClaim = Depends(get_current_identity),
) -> TaskResponse:
    return TaskResponse.from_task(_load_authorized(request, task_id, identity))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdate,
    identity: IdentityClaim = Depends(get_current_identity),
) -> TaskResponse:
    """Rename a task. An absent or empty title leaves the task unchanged."""
    task = _load_authorized(request, task_id, identity)
    task_store: TaskStore = request.app.state.task_store
    if body.title:
        task_store.update_title(task.id, body.title)
        # Re-read through the policy: the task may have been deleted meanwhile.
        task = _load_authorized(request, task.id, identity)
    return TaskResponse.from_task(task)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(
    request: Request,
    task_id: str,
    identity: IdentityClaim = Depends(get_current_identity),
) -> MessageResponse:
    task = _load_authorized(request, task_id, identity)
    task_store: TaskStore = request.app.state.task_store
    task_store.delete_task(task.id)
    return MessageResponse(message="Deleted")
