"""
FastAPI server for the Pudgy Pet service.

This module implements the HTTP API the mini app talks to: one endpoint to
perform an action on the caller's pet and one to check in on it.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings
from .errors import StoreError, ValidationError
from .logging_config import configure_logging
from .models import StatSnapshot
from .service import InteractionResult, PetService, build_service

logger = logging.getLogger(__name__)

ACTION_FAILED_MESSAGE = (
    "Oops! 😅 Something went wrong with your Pudgy pet! *sad penguin noises* 🐧💔"
)
STATUS_FAILED_MESSAGE = (
    "Oops! 😅 Could not check on your Pudgy pet! *worried penguin face* 🐧💔"
)


# API Request/Response Schemas
class InteractionRequest(BaseModel):
    """Payload for action requests. Presence is validated by the service."""

    model_config = ConfigDict(populate_by_name=True)

    action: str | None = Field(None, description="The action to perform")
    user_id: str | None = Field(None, alias="userId", description="Pet owner")
    message: str | None = Field(None, description="Optional free text")


class InteractionResponse(BaseModel):
    """Response model for pet endpoints."""

    message: str = Field(..., description="What the pet says")
    stats: StatSnapshot = Field(..., description="The pet's stats after the call")
    action: str | None = Field(None, description="The action as received")

    @classmethod
    def from_result(cls, result: InteractionResult) -> "InteractionResponse":
        return cls(message=result.message, stats=result.stats, action=result.action)


def create_app(service: PetService) -> FastAPI:
    """
    Create a FastAPI application with the given pet service.

    Args:
        service: The PetService instance to use for the application

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        yield
        await service.aclose()

    app = FastAPI(
        title="Pudgy Pet",
        description="Virtual pet API with AI companion dialogue",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "pudgy-pet"}

    @app.post("/api/pudgy-ai")
    async def interact(request: InteractionRequest) -> InteractionResponse:
        """
        Perform an action on the caller's pet.

        Args:
            request: The action, user id and optional message

        Returns:
            The pet's reply and updated stats
        """
        try:
            result = await service.interact(
                request.user_id, request.action, request.message
            )
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except StoreError:
            logger.exception("Failed to persist pet for user=%s", request.user_id)
            raise HTTPException(status_code=500, detail=ACTION_FAILED_MESSAGE)
        except Exception:
            logger.exception("Unexpected error handling action %r", request.action)
            raise HTTPException(status_code=500, detail=ACTION_FAILED_MESSAGE)
        return InteractionResponse.from_result(result)

    @app.get("/api/pudgy-ai")
    async def check_in(
        user_id: str | None = Query(None, alias="userId"),
    ) -> InteractionResponse:
        """
        Check in on the caller's pet, applying any pending decay.

        Returns:
            A greeting from the pet and its current stats
        """
        try:
            result = await service.check_in(user_id)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception:
            logger.exception("Failed to check in on pet for user=%s", user_id)
            raise HTTPException(status_code=500, detail=STATUS_FAILED_MESSAGE)
        return InteractionResponse.from_result(result)

    return app


def build_app(settings: Settings | None = None) -> FastAPI:
    """Create the production app from environment settings."""
    settings = settings or Settings.from_env()
    configure_logging(level=settings.log_level)
    return create_app(build_service(settings))


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "pudgy_pet.server:build_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
