"""devhub-mcp: an MCP server exposing GitHub, JIRA, Slack and Google Calendar tools."""

__version__ = "0.1.0"
