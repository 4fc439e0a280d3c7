from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bucketview.config import get_settings
from bucketview.deps import GatewayFactory, gateway_factory, open_gateway, to_record
from bucketview.errors import BucketViewError, MissingFieldError, ValidationError
from bucketview.middleware.logging_filter import RequestIdFilter, configure_logging
from bucketview.middleware.request_id import RequestIdMiddleware, request_id_var
from bucketview.schemas import (
    CredentialConfig,
    ListRequest,
    ListResponse,
    ObjectItem,
    PrefixItem,
    PresignRequest,
    UploadResponse,
    UrlResponse,
)
from bucketview.services.uploader import upload_file

settings = get_settings()
configure_logging(settings.log_level)
log = logging.getLogger("bucketview")
if not any(isinstance(f, RequestIdFilter) for f in log.filters):
    log.addFilter(RequestIdFilter())

app = FastAPI(title="Bucket browser proxy", version="0.1.0")

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BucketViewError)
async def _bucketview_error(request: Request, exc: BucketViewError) -> JSONResponse:
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    log.log(
        level,
        "request_id=%s %s failed type=%s error=%s",
        request_id_var.get() or "-",
        request.url.path,
        type(exc).__name__,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "type": type(exc).__name__})


@app.exception_handler(RequestValidationError)
async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request: " + "; ".join(parts), "type": ValidationError.__name__},
    )


@app.get("/health")
def health():
    return {"ok": True}


router = APIRouter()


@router.post("/list", response_model=ListResponse, response_model_exclude_none=True)
def list_objects(req: ListRequest, make_gateway: GatewayFactory = Depends(gateway_factory)):
    record = to_record(req.config)
    gateway, _ = open_gateway(make_gateway, req.provider, record)
    prefix = req.prefix or ""

    t0 = time.perf_counter()
    payload = gateway.list_objects(prefix, delimiter=settings.list_delimiter, max_keys=settings.list_max_keys)
    log.info(
        "request_id=%s list provider=%s bucket=%s prefix=%r folders=%s files=%s ms=%s",
        request_id_var.get() or "-",
        req.provider,
        record.bucket_name,
        prefix,
        len(payload.common_prefixes),
        len(payload.objects),
        int((time.perf_counter() - t0) * 1000),
    )
    return ListResponse(
        contents=[ObjectItem(key=o.key, size=o.size, last_modified=o.last_modified) for o in payload.objects],
        common_prefixes=[PrefixItem(prefix=p) for p in payload.common_prefixes],
    )


@router.post("/presign", response_model=UrlResponse)
def presign(req: PresignRequest, make_gateway: GatewayFactory = Depends(gateway_factory)):
    record = to_record(req.config)
    key = (req.key or "").strip()
    if not key:
        raise MissingFieldError(["key"])
    gateway, _ = open_gateway(make_gateway, req.provider, record)
    ttl = req.ttl_seconds or settings.presign_ttl_seconds
    url = gateway.presign_get(key, ttl)
    log.info("request_id=%s presign bucket=%s key=%s ttl=%s", request_id_var.get() or "-", record.bucket_name, key, ttl)
    return UrlResponse(url=url)


@router.post("/upload", response_model=UploadResponse)
def upload(
    file: UploadFile | None = File(None),
    provider: str = Form("r2"),
    accessKeyId: str | None = Form(None),
    secretAccessKey: str | None = Form(None),
    bucketName: str | None = Form(None),
    region: str | None = Form(None),
    accountId: str | None = Form(None),
    publicDomain: str | None = Form(None),
    make_gateway: GatewayFactory = Depends(gateway_factory),
):
    record = to_record(
        CredentialConfig(
            access_key_id=accessKeyId,
            secret_access_key=secretAccessKey,
            bucket_name=bucketName,
            region=region,
            account_id=accountId,
            public_domain=publicDomain,
        )
    )
    if file is None or not file.filename:
        raise MissingFieldError(["file"])
    gateway, cfg = open_gateway(make_gateway, provider, record)

    data = file.file.read(settings.upload_max_bytes + 1)
    if len(data) > settings.upload_max_bytes:
        raise ValidationError(f"File too large (limit {settings.upload_max_bytes} bytes)")

    result = upload_file(
        gateway,
        provider,
        record,
        file.filename,
        data,
        content_type=file.content_type,
        region=cfg.region,
    )
    return UploadResponse(url=result.url, key=result.key)


app.include_router(router)
# the browser front end calls the same handlers under /api
app.include_router(router, prefix="/api")
