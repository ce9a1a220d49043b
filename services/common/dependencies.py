from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from .dapr_client import DaprClient


@asynccontextmanager
async def dapr_lifespan(app: FastAPI):
    # One client per process, shared by every request handler.
    app.state.dapr = DaprClient()
    try:
        yield
    finally:
        app.state.dapr.close()


def get_dapr(request: Request) -> DaprClient:
    return request.app.state.dapr
