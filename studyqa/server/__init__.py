"""
StudyQA servers

- api: FastAPI app for the browser front end
- mcp_app: FastMCP stdio server exposing the same operations as tools
"""
