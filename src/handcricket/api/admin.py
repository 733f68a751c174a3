"""Admin API: read/replace the admin and hub identities, record upgrades.

Writes require a grant for the current admin identity.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from handcricket.api.deps import EngineDep

router = APIRouter(prefix="/api/admin", tags=["admin"])


class IdentityRequest(BaseModel):
    identity: str = Field(min_length=1)


class UpgradeRequest(BaseModel):
    new_code_hash: str = Field(pattern=r"^(0x)?[0-9a-fA-F]{64}$")


@router.get("/admin")
async def get_admin(engine: EngineDep) -> dict:
    return {"data": {"admin": await engine.get_admin()}}


@router.put("/admin")
async def set_admin(body: IdentityRequest, engine: EngineDep) -> dict:
    await engine.set_admin(body.identity)
    return {"data": {"admin": body.identity}}


@router.get("/hub")
async def get_hub(engine: EngineDep) -> dict:
    return {"data": {"hub": await engine.get_hub()}}


@router.put("/hub")
async def set_hub(body: IdentityRequest, engine: EngineDep) -> dict:
    await engine.set_hub(body.identity)
    return {"data": {"hub": body.identity}}


@router.post("/upgrade")
async def upgrade(body: UpgradeRequest, engine: EngineDep) -> dict:
    code_hash = bytes.fromhex(body.new_code_hash.removeprefix("0x"))
    await engine.upgrade(code_hash)
    return {"data": {"code_hash": code_hash.hex()}}
