"""
Backup trigger endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header

from gym_backend.models.schemas import BackupResponse
from gym_backend.services.backup_service import BackupService

router = APIRouter(prefix="/api/backup")


def get_backup_service() -> BackupService:
    return BackupService.from_settings()


@router.post("", response_model=BackupResponse)
def run_backup(
    x_backup_token: Optional[str] = Header(None, alias="X-BACKUP-TOKEN"),
    service: BackupService = Depends(get_backup_service),
):
    """
    Run the backup script. Always 200; check `success` in the body.
    Blocking, so FastAPI runs it in the threadpool.
    """
    return service.run(x_backup_token)
