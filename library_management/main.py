import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from library_management.crud import CreateData
from library_management.domain.exceptions import (
    InvalidParametersError,
    LendingRuleError,
    NotFoundError,
)
from library_management.load_secrets import log_level
from library_management.routers import library

logging.basicConfig(level=log_level)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

create_data = CreateData()


@asynccontextmanager
async def lifespan(app):
    """Create the library tables if they do not exist yet.
    This function is called to start the server.
    """
    await create_data.create_table()
    try:
        yield
    finally:
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(library.library_router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(LendingRuleError)
async def lending_rule_handler(request: Request, exc: LendingRuleError):
    logging.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(InvalidParametersError)
async def invalid_parameters_handler(request: Request, exc: InvalidParametersError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})


# if __name__ == "__main__":
#     uvicorn.run(app, host="0.0.0.0", port=8080, reload=True)
