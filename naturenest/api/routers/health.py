# naturenest/api/routers/health.py
from fastapi import APIRouter

router = APIRouter()


@router.get("")
async def health():
    return {"message": "service is up and running"}
