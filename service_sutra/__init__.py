"""
Sutra: MCP server exposing Salesforce ecosystem knowledge from the Yantra API.
"""
