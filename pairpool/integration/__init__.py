"""
Scenario-driven integration layer
"""

from .scenario import (
    Scenario,
    ScenarioError,
    ScenarioResult,
    StepOutcome,
    load_scenario,
    parse_scenario,
    run_scenario,
)

__all__ = [
    "Scenario",
    "ScenarioError",
    "ScenarioResult",
    "StepOutcome",
    "load_scenario",
    "parse_scenario",
    "run_scenario",
]
