from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, select, desc
from typing import List, Optional
from datetime import datetime, timezone
import uuid

from taskflow.db.session import get_session
from taskflow.models.user import User
from taskflow.models.task import Task, TaskStatus, TaskPriority
from taskflow.models.subtask import Subtask
from taskflow.schemas.task import TaskCreate, TaskRead, TaskUpdate, TaskStats
from taskflow.schemas.subtask import SubtaskCreate, SubtaskRead
from taskflow.api.deps import get_current_user

router = APIRouter()


def get_owned_task(session: Session, task_id: uuid.UUID, user: User) -> Task:
    """Rows of other users are reported exactly like missing ones."""
    task = session.get(Task, task_id)
    if not task or task.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.get("/stats", response_model=TaskStats)
def get_task_stats(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    # Only the status column is fetched; counting happens here
    statuses = session.exec(select(Task.status).where(Task.user_id == current_user.id)).all()
    completed = sum(1 for s in statuses if s == TaskStatus.completed)

    return TaskStats(
        total=len(statuses),
        completed=completed,
        pending=len(statuses) - completed,
    )

@router.get("/", response_model=List[TaskRead])
def list_user_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    query = select(Task).where(Task.user_id == current_user.id)
    if status is not None:
        query = query.where(Task.status == status)
    if priority is not None:
        query = query.where(Task.priority == priority)

    # Newest first
    query = query.order_by(desc(Task.created_at))
    if limit is not None:
        query = query.limit(limit)

    return session.exec(query).all()

@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    task_create: TaskCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    now = datetime.now(timezone.utc)
    db_task = Task(
        user_id=current_user.id,
        title=task_create.title,
        description=task_create.description,
        status=task_create.status,
        priority=task_create.priority,
        due_date=task_create.due_date,
        created_at=now,
        updated_at=now
    )
    session.add(db_task)
    session.commit()
    session.refresh(db_task)
    return db_task

@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    return get_owned_task(session, task_id, current_user)

@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: uuid.UUID,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    task = get_owned_task(session, task_id, current_user)

    for key, value in task_update.changes().items():
        setattr(task, key, value)

    task.updated_at = datetime.now(timezone.utc)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

@router.post("/{task_id}/toggle", response_model=TaskRead)
def toggle_task_status(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    task = get_owned_task(session, task_id, current_user)
    task.status = TaskStatus(task.status).toggled()
    task.updated_at = datetime.now(timezone.utc)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task

@router.delete("/{task_id}")
def delete_task(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    task = get_owned_task(session, task_id, current_user)
    session.delete(task)
    session.commit()
    return {"ok": True}

# --- SUBTASKS OF A TASK ---

@router.get("/{task_id}/subtasks", response_model=List[SubtaskRead])
def list_subtasks(
    task_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    get_owned_task(session, task_id, current_user)
    return session.exec(
        select(Subtask)
        .where(Subtask.task_id == task_id, Subtask.user_id == current_user.id)
        .order_by(Subtask.created_at)
    ).all()

@router.post("/{task_id}/subtasks", response_model=SubtaskRead, status_code=status.HTTP_201_CREATED)
def create_subtask(
    task_id: uuid.UUID,
    subtask_create: SubtaskCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    get_owned_task(session, task_id, current_user)

    now = datetime.now(timezone.utc)
    db_subtask = Subtask(
        task_id=task_id,
        user_id=current_user.id,
        title=subtask_create.title,
        status=subtask_create.status,
        created_at=now,
        updated_at=now
    )
    session.add(db_subtask)
    session.commit()
    session.refresh(db_subtask)
    return db_subtask
