"""
handlers/resource_handler.py
----------------------------
Handles MCP resources/list and resources/read.
Each table in the configured schema is exposed as a read-only resource
describing its columns:

    postgres://<user>@<host>:<port>/<db>/<table>/schema
"""

import asyncio
from urllib.parse import quote, unquote, urlsplit

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from psycopg2.extensions import parse_dsn

from repositories.schema_repo import SchemaRepository
from services.normalizer import to_text

SCHEMA_PATH = "schema"
MIME_TYPE = "application/json"


def resource_base_url(database_url: str) -> str:
    """
    Derive the resource base URL from the connection string, dropping the password.

    Accepts both URL and key=value connection strings.
    """
    dsn = parse_dsn(database_url)
    host = dsn.get("host") or "localhost"
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{host}:{dsn['port']}" if dsn.get("port") else host
    if dsn.get("user"):
        netloc = f"{quote(dsn['user'], safe='')}@{netloc}"
    return f"postgres://{netloc}/{quote(dsn.get('dbname', ''))}"


def resource_uri(base_url: str, table_name: str) -> str:
    return f"{base_url}/{quote(table_name, safe='')}/{SCHEMA_PATH}"


def table_from_uri(uri: str) -> str:
    """
    Extract the table name from a schema resource URI.

    Raises:
        ValueError: If the URI does not end in /<table>/schema.
    """
    segments = urlsplit(uri).path.split("/")
    if len(segments) < 2 or segments[-1] != SCHEMA_PATH or not segments[-2]:
        raise ValueError("Invalid resource URI")
    return unquote(segments[-2])


async def list_resources(repo: SchemaRepository, base_url: str) -> list[types.Resource]:
    tables = await asyncio.to_thread(repo.list_tables)
    return [
        types.Resource(
            uri=resource_uri(base_url, table),
            mimeType=MIME_TYPE,
            name=f'"{table}" database schema',
        )
        for table in tables
    ]


async def read_resource(repo: SchemaRepository, uri: str) -> str:
    table_name = table_from_uri(uri)
    columns = await asyncio.to_thread(repo.get_columns, table_name)
    return to_text(columns)


def register(server: Server, repo: SchemaRepository, base_url: str) -> None:
    """Attach the resource handlers to the server."""

    @server.list_resources()
    async def handle_list_resources() -> list[types.Resource]:
        return await list_resources(repo, base_url)

    @server.read_resource()
    async def handle_read_resource(uri) -> list[ReadResourceContents]:
        text = await read_resource(repo, str(uri))
        return [ReadResourceContents(content=text, mime_type=MIME_TYPE)]
