#!/usr/bin/env python3
"""MCP Server for Wealth Planner.

This server exposes the wealth simulation engine as MCP tools,
allowing AI assistants to answer questions about a user's plan.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools


# Create the MCP server
server = Server("wealth-planner")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via WEALTH_PLANNER_PROGRAM env var
        default_program = os.environ.get('WEALTH_PLANNER_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

RETIREMENT_AGE_PARAM = {
    "type": "integer",
    "description": "Optional: retirement age to simulate instead of the one in the program's spec."
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available wealth planning tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available wealth planning programs with their ages and final net worth.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_simulation_summary",
            description="Get headline figures for a plan: monthly income and expenses, emergency fund target, debt-free and emergency-fund milestone ages, years spent in each phase, and final net worth.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM,
                    "retirement_age": RETIREMENT_AGE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_year",
            description="Get the simulated figures for one age: phase, salary, expenses, free capital, withdrawals, and end-of-year debt, savings and investments.",
            inputSchema={
                "type": "object",
                "properties": {
                    "age": {
                        "type": "integer",
                        "description": "The age to look up"
                    },
                    "program": PROGRAM_PARAM,
                    "retirement_age": RETIREMENT_AGE_PARAM
                },
                "required": ["age"]
            }
        ),
        Tool(
            name="get_phase_years",
            description="Get every simulated year in one phase: 'debt' (debt elimination), 'emergency' (building the emergency fund), 'retirement' (investing for retirement) or 'postRetirement' (retired).",
            inputSchema={
                "type": "object",
                "properties": {
                    "phase": {
                        "type": "string",
                        "enum": ["debt", "emergency", "retirement", "postRetirement"],
                        "description": "The phase to list"
                    },
                    "program": PROGRAM_PARAM,
                    "retirement_age": RETIREMENT_AGE_PARAM
                },
                "required": ["phase"]
            }
        ),
        Tool(
            name="find_optimal_retirement_age",
            description="Find the earliest retirement age for which net worth never goes negative before the end of the lifespan. Reports explicitly when no age in the range is sustainable.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM,
                    "min_age": {
                        "type": "integer",
                        "description": "Optional: youngest age to consider (default: next year)"
                    },
                    "max_age": {
                        "type": "integer",
                        "description": "Optional: oldest age to consider (default: lifespan)"
                    }
                },
                "required": []
            }
        ),
        Tool(
            name="get_cache_stats",
            description="Get simulation cache diagnostics: entry count, hits, misses and hit rate.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        wp_tools = get_tools()
        program = arguments.get("program")
        retirement_age = arguments.get("retirement_age")

        if name == "list_programs":
            result = wp_tools.list_programs()
        elif name == "reload_programs":
            result = wp_tools.reload_programs()
        elif name == "get_simulation_summary":
            result = wp_tools.get_simulation_summary(program, retirement_age)
        elif name == "get_year":
            result = wp_tools.get_year(arguments["age"], program, retirement_age)
        elif name == "get_phase_years":
            result = wp_tools.get_phase_years(arguments["phase"], program, retirement_age)
        elif name == "find_optimal_retirement_age":
            result = wp_tools.find_optimal_retirement_age(
                program,
                arguments.get("min_age"),
                arguments.get("max_age")
            )
        elif name == "get_cache_stats":
            result = wp_tools.get_cache_stats()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
