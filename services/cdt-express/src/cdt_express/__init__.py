"""CDT Express MCP: tools proxying the riskthinking.ai CDT Express climate risk API."""

__version__ = "0.3.1"
