"""Analysis API: critical path of a Go package."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from pcritical.errors import PcriticalError
from pcritical.models import AnalysisConfig
from pcritical.pipeline import run_analysis
from pcritical.report import critical_path_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# one analysis at a time: runs share the cache directory
_analysis_lock = threading.Lock()


class CriticalPathRequest(BaseModel):
    target: str
    skip_standard: bool = False
    include_unsafe: bool = False


def _analyze(req: CriticalPathRequest) -> dict:
    config = AnalysisConfig(
        target=req.target,
        dot_output=None,
        skip_standard=req.skip_standard,
        include_unsafe=req.include_unsafe,
    )
    cache_dir = os.environ.get("PCRITICAL_CACHE_DIR")
    if cache_dir:
        config.cache_dir = Path(cache_dir)
    with _analysis_lock:
        result = run_analysis(config)
    return critical_path_to_dict(result.path)


@router.post("/critical-path")
async def critical_path(req: CriticalPathRequest):
    if not req.target.strip():
        raise HTTPException(400, "target must not be empty")
    try:
        return await asyncio.to_thread(_analyze, req)
    except PcriticalError as e:
        logger.info("analysis of %s failed: %s", req.target, e)
        raise HTTPException(422, str(e))
