from __future__ import annotations

import os

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .errors import SimplexError
from .lp.diagnostics import analyze_infeasibility
from .lp.simplex import simplex_solve
from .schemas import LPProblem, SimplexResult, SolveOptions

app = FastMCP("Simplex Optimizer")


@app.tool()
def solve_linear_program(problem: LPProblem, options: SolveOptions | None = None) -> dict:
    """
    Solve a linear program with the two-phase simplex method.

    Args:
        problem: Objective coefficients, constraints (each with coefficients,
            relation "<=", ">=" or "=", and rhs) and sense ("max"/"maximize" or
            "min"/"minimize"). All variables are implicitly non-negative.
        options: Optional solver options (tol, max_iters).

    Returns:
        Dictionary with the solution fields and a human-readable 'summary'.
    """
    opts = options or SolveOptions()
    try:
        result = simplex_solve(problem, opts)
    except SimplexError as e:
        return {"error": f"Failed to solve problem: {str(e)}", "solution": None}

    payload = result.model_dump()
    payload["summary"] = format_summary(problem, result)
    return payload


@app.tool()
def diagnose_infeasibility(problem: LPProblem) -> dict:
    """Return heuristic infeasibility analysis for the given LP."""
    try:
        return analyze_infeasibility(problem.constraints)
    except SimplexError as e:
        return {"error": str(e)}


def format_summary(problem: LPProblem, result: SimplexResult) -> str:
    sense = "Maximize" if problem.sense == "max" else "Minimize"
    lines = [
        "Linear Programming Solution",
        "",
        "Problem:",
        f"- {sense} objective with {len(problem.objective)} variables",
        f"- {len(problem.constraints)} constraints",
        "",
        f"Status: {result.status}",
    ]
    if result.status == "optimal":
        lines += ["", "Optimal Solution:", f"- Objective Value: {result.objective_value:.6f}", "- Variable Values:"]
        lines += [f"  x[{i}] = {value:.6f}" for i, value in enumerate(result.solution)]
    elif result.status == "infeasible":
        lines += ["", "No optimal solution found. The problem is infeasible (constraints cannot be satisfied simultaneously)."]
    else:
        lines += ["", "No optimal solution found. The problem is unbounded (objective can be improved indefinitely)."]
    return "\n".join(lines)


if __name__ == "__main__":
    import sys

    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        port = int(os.environ.get("PORT", "8081"))
        app.settings.host = "0.0.0.0"
        app.settings.port = port
        app.settings.streamable_http_path = "/mcp"
        app.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        app.run(transport="streamable-http")
