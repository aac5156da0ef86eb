from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Path

from containerdash.dependencies import get_page_assembler
from containerdash.schemas.page import PageData
from containerdash.services.page import PageAssembler


router = APIRouter(prefix="/containers", tags=["containers"])


@router.get("/", response_model=PageData)
async def root_container_page(assembler: PageAssembler = Depends(get_page_assembler)):
    return await asyncio.to_thread(assembler.render, "/")


@router.get("/{name:path}", response_model=PageData)
async def container_page(
    name: str = Path(..., description="Container path below the page root, e.g. docker/web"),
    assembler: PageAssembler = Depends(get_page_assembler),
):
    # The container name is the path after the page root
    return await asyncio.to_thread(assembler.render, f"/{name.strip('/')}")
