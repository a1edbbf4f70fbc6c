"""Generation module for rule-based backlog creation.

This module provides tools to:
- Parse the users and goal fields (input_parser.py)
- Hold the static task and risk rules (rules.py)
- Generate ordered backlog items from a project description (backlog_generator.py)
"""

from .input_parser import ParsedInput, parse_roles, parse_goal, parse_input
from .rules import RuleEntry, ConstraintRule, RuleTables, DEFAULT_RULES
from .backlog_generator import BacklogGenerator, generate_all_tasks

__all__ = [
    "ParsedInput",
    "parse_roles",
    "parse_goal",
    "parse_input",
    "RuleEntry",
    "ConstraintRule",
    "RuleTables",
    "DEFAULT_RULES",
    "BacklogGenerator",
    "generate_all_tasks",
]
