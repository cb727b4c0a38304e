# This file bootstraps the FastAPI app, wires up the logging and
# security-header middlewares, and includes the editor and publish routers.

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from postdesk.api.editor import router as editor_router
from postdesk.api.publish import router as publish_router
from postdesk.core.logging import APILoggingMiddleware
from postdesk.core.security_headers import SecurityHeadersMiddleware
from postdesk.core.startup_checks import run_startup_checks
from postdesk.publishing.errors import PublishError


app = FastAPI(title="postdesk")


@app.on_event("startup")
def _run_startup_checks() -> None:
    run_startup_checks()


@app.exception_handler(PublishError)
def handle_publish_error(_request, exc: PublishError):
    response = JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    response.headers["X-Error-Code"] = exc.code
    return response


app.add_middleware(APILoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

app.include_router(editor_router)
app.include_router(publish_router)


@app.get("/ping")
def ping():
    return {"status": "ok"}
