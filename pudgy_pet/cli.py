"""
Command-line interface tools for the Pudgy Pet service.
"""

import asyncio
import json
from collections.abc import Coroutine
from typing import Any

import httpx
import typer

from .models import StatSnapshot

DEFAULT_BASE_URL = "http://localhost:8000"
API_PATH = "/api/pudgy-ai"

app = typer.Typer(help="Pudgy Pet CLI tools")


# MARK: - Commands


@app.command()
def interact(
    action: str = typer.Argument(..., help="Action to perform (feed, play, pet, ...)"),
    user: str = typer.Option(..., "--user", help="User ID owning the pet"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Free text for chat"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Pudgy Pet service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Perform an action on your pet."""

    async def _interact() -> None:
        payload: dict[str, str] = {"action": action, "userId": user}
        if message:
            payload["message"] = message

        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(f"{base_url}{API_PATH}", json=payload)
            response.raise_for_status()
            _print_result(response.json(), json_output)

    _run_with_error_handling(_interact(), base_url)


@app.command()
def status(
    user: str = typer.Option(..., "--user", help="User ID owning the pet"),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Pudgy Pet service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Check in on your pet."""

    async def _status() -> None:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.get(
                f"{base_url}{API_PATH}", params={"userId": user}
            )
            response.raise_for_status()
            _print_result(response.json(), json_output)

    _run_with_error_handling(_status(), base_url)


# MARK: - Private Helpers


def _format_stats(stats: StatSnapshot) -> str:
    return (
        f"hunger {stats.hunger}/100 | happiness {stats.happiness}/100 | "
        f"energy {stats.energy}/100 | mood {stats.mood.value}"
    )


def _print_result(result: dict[str, Any], json_output: bool) -> None:
    if json_output:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    stats = StatSnapshot.model_validate(result["stats"])
    print(result["message"])
    print(_format_stats(stats))


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
