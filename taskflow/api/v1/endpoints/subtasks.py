from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from datetime import datetime, timezone
import uuid

from taskflow.db.session import get_session
from taskflow.models.user import User
from taskflow.models.task import TaskStatus
from taskflow.models.subtask import Subtask
from taskflow.schemas.subtask import SubtaskRead, SubtaskUpdate
from taskflow.api.deps import get_current_user

router = APIRouter()


def get_owned_subtask(session: Session, subtask_id: uuid.UUID, user: User) -> Subtask:
    subtask = session.get(Subtask, subtask_id)
    if not subtask or subtask.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subtask not found")
    return subtask


@router.put("/{subtask_id}", response_model=SubtaskRead)
def update_subtask(
    subtask_id: uuid.UUID,
    subtask_update: SubtaskUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    subtask = get_owned_subtask(session, subtask_id, current_user)

    for key, value in subtask_update.changes().items():
        setattr(subtask, key, value)

    subtask.updated_at = datetime.now(timezone.utc)
    session.add(subtask)
    session.commit()
    session.refresh(subtask)
    return subtask

@router.post("/{subtask_id}/toggle", response_model=SubtaskRead)
def toggle_subtask_status(
    subtask_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    subtask = get_owned_subtask(session, subtask_id, current_user)
    subtask.status = TaskStatus(subtask.status).toggled()
    subtask.updated_at = datetime.now(timezone.utc)
    session.add(subtask)
    session.commit()
    session.refresh(subtask)
    return subtask

@router.delete("/{subtask_id}")
def delete_subtask(
    subtask_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    subtask = get_owned_subtask(session, subtask_id, current_user)
    session.delete(subtask)
    session.commit()
    return {"ok": True}
