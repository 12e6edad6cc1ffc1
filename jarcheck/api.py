"""FastAPI service that analyzes an uploaded classpath document."""

from __future__ import annotations

import argparse
from dataclasses import replace
from functools import lru_cache
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from .config import AnalysisConfig, resolve_config
from .pipeline import analyze_classpath, resolve_runtime
from .runtime import RuntimeClassProvider, RuntimeLookupError
from .storage import ClasspathFormatError, classpath_from_dict


app = FastAPI(title="jarcheck API")


@lru_cache(maxsize=1)
def get_config() -> AnalysisConfig:
    return resolve_config()


@lru_cache(maxsize=1)
def _load_runtime() -> RuntimeClassProvider:
    return resolve_runtime(get_config())


def get_runtime() -> RuntimeClassProvider:
    return _load_runtime()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
def analyze(
    document: dict[str, Any] = Body(...),
    check_final_write: bool | None = Query(default=None),
    config: AnalysisConfig = Depends(get_config),
    runtime: RuntimeClassProvider = Depends(get_runtime),
) -> JSONResponse:
    try:
        classpath = classpath_from_dict(document)
    except ClasspathFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if check_final_write is not None:
        config = replace(config, check_final_write=check_final_write)

    try:
        report = analyze_classpath(classpath, runtime, config)
    except RuntimeLookupError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return JSONResponse(content=report.to_dict())


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the jarcheck API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host")
    parser.add_argument("--port", type=int, default=9000, help="Bind port")
    args = parser.parse_args()

    from .log import configure_logging

    config = get_config()
    configure_logging(config.log_level, json_format=config.log_format == "json")

    import uvicorn

    uvicorn.run("jarcheck.api:app", host=args.host, port=args.port, reload=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
