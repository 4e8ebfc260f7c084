import logging
from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from pydantic import ValidationError

from .detect import diagnose
from .models import DetectionConfig, HealthResponse, InspectionReport
from .rules import ACCEPTED_EXTENSIONS

log = logging.getLogger("csv_inspector.main")

app = FastAPI(
    title="csv-inspector",
    description="Delimiter, newline, header and encoding detection for CSV uploads",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/inspect", response_model=InspectionReport, response_model_by_alias=True)
async def inspect_csv(
    file: UploadFile = File(...),
    delimiters: Optional[List[str]] = Query(default=None),
    newlines: Optional[List[str]] = Query(default=None),
    sample_size: Optional[int] = Query(default=None),
    min_lines: Optional[int] = Query(default=None),
):
    filename = (file.filename or "").lower()
    if not filename.endswith(ACCEPTED_EXTENSIONS):
        log.info("rejected upload %r: unsupported extension", file.filename)
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    overrides = {
        "delimiters": delimiters,
        "newlines": newlines,
        "sample_size": sample_size,
        "min_lines": min_lines,
    }
    try:
        config = DetectionConfig.model_validate(
            {key: value for key, value in overrides.items() if value is not None}
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    raw = await file.read()
    return diagnose(raw, config)
