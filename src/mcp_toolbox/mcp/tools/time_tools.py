"""Clock tool: current wall-clock time in an IANA timezone."""

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from mcp_toolbox.mcp.faults import InvalidOperationFault
from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.schema import SchemaDescriptor, string

DEFAULT_TIMEZONE = "Asia/Seoul"

CURRENT_TIME_SCHEMA = SchemaDescriptor({
    "timezone": string(
        f"IANA timezone name, e.g. 'Europe/London' (default: {DEFAULT_TIMEZONE})",
        required=False,
        default=DEFAULT_TIMEZONE,
    ),
})


def _now(zone: tzinfo) -> datetime:
    return datetime.now(zone)


def resolve_timezone(name: str) -> ZoneInfo:
    """
    Resolve an IANA timezone name.

    Raises:
        InvalidOperationFault: If the name is not a known timezone
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidOperationFault(f"Unknown timezone: {name}") from None


def current_time_handler(timezone: str) -> str:
    zone = resolve_timezone(timezone)
    now = _now(zone)
    offset = now.isoformat()[-6:]
    return f"Current time in {timezone}: {now:%Y-%m-%d %H:%M:%S} (UTC{offset})"


def register_time_tool(registry: Registry) -> None:
    registry.register_tool(
        name="current_time",
        schema=CURRENT_TIME_SCHEMA,
        handler=current_time_handler,
        description="Get the current date and time in a timezone",
    )
