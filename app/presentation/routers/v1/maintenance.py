from typing import Annotated

from fastapi import APIRouter, Depends

from app.domain.passcode_manager import OneTimePasscodeManager
from app.presentation.dependencies import get_passcode_manager, require_admin
from app.schemas.responses import CleanupOut, PasscodeStatsOut

router = APIRouter(
    prefix="/maintenance",
    tags=["Maintenance"],
    dependencies=[Depends(require_admin)],
)


@router.get("/passcodes/stats", response_model=list[PasscodeStatsOut])
async def get_passcode_stats(
    passcodes: Annotated[OneTimePasscodeManager, Depends(get_passcode_manager)],
):
    return [
        PasscodeStatsOut(
            purpose=s.purpose.value, total=s.total, used=s.used, expired=s.expired
        )
        for s in await passcodes.stats()
    ]


@router.post("/passcodes/cleanup", response_model=CleanupOut)
async def post_passcode_cleanup(
    passcodes: Annotated[OneTimePasscodeManager, Depends(get_passcode_manager)],
):
    return CleanupOut(removed=await passcodes.cleanup_expired())
