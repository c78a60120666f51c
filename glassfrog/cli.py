"""CLI for the GlassFrog client."""

import sys
from typing import Annotated, Any, Literal

import structlog
from cyclopts import App, Parameter

from glassfrog.client import Client
from glassfrog.config import get_config
from glassfrog.config_commands import config_app
from glassfrog.exceptions import GlassfrogError
from glassfrog.graph import CircleNode
from glassfrog.models import Base

logger = structlog.get_logger()

app = App(help="GlassFrog - query an organization's circles, roles and people")

app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_client() -> Client:
    """Build a client from the configuration."""
    config = get_config()
    if not config.get("api_key"):
        raise ValueError("GlassFrog API key not configured. Set it using:\n  glassfrog config set api_key <key>")
    return Client.from_config(config)


def parse_option(option: str | None) -> Any:
    """Parse ``key=value,key=value`` filters; anything else is passed through as an id."""
    if not option or "=" not in option:
        return option
    filters = {}
    for pair in option.split(","):
        if "=" in pair:
            key, value = pair.split("=", 1)
            filters[key.strip()] = value.strip()
    return filters


def describe(record: Base) -> str:
    label = getattr(record, "name", None) or getattr(record, "description", None) or ""
    return f"{record.id}: {label}"


def render_tree(node: CircleNode) -> list[str]:
    return ["  " * descendant.depth + f"{descendant.id}: {descendant.name}" for descendant in node.walk()]


@app.command
def get(kind: str, option: str | None = None) -> None:
    """List records of a kind, optionally by id or key=value filters."""
    with get_client() as client:
        records = client.get(kind, parse_option(option))
    print(f"Found {len(records)} record(s):\n")
    for record in records:
        print(describe(record))


@app.command
def delete(kind: str, identifier: str) -> None:
    """Delete a record by id."""
    with get_client() as client:
        deleted = client.delete(kind, identifier)
    print(f"Deleted {kind} {identifier}" if deleted else f"Could not delete {kind} {identifier}")


@app.command
def root() -> None:
    """Print the root circle of the organization."""
    with get_client() as client:
        circle = client.find_root()
    print(describe(circle))


@app.command
def hierarchy() -> None:
    """Print the circle hierarchy."""
    with get_client() as client:
        tree = client.build_hierarchy()
    print("\n".join(render_tree(tree)))


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    try:
        app(tokens)
    except (GlassfrogError, ValueError) as e:
        logger.debug("Command failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    app.meta()
